"""Simuladores contábeis: motor de simulação parametrizado por rule sets"""

__version__ = "0.1.0"
