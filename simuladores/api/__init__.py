"""API HTTP dos simuladores"""
