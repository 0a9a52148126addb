"""Exemplos de uso dos simuladores com os parâmetros padrão"""

from simuladores.core import (
    ActiveRuleSetResolver,
    BracketNotFound,
    FatorRInput,
    FeriasInput,
    HonorariosInput,
    RescisaoInput,
    RuleSetKey,
    SimplesInput,
    StaticConfigSource,
    TipoRescisao,
    calculate,
)


def example_ferias(resolver):
    """Férias de um salário de R$ 3.000 vendendo 5 dias"""
    print("=" * 60)
    print("Exemplo 1: Férias com abono pecuniário")
    print("=" * 60)

    resolved = resolver.resolve_active(RuleSetKey.FERIAS, "escritorio-demo")
    result = calculate(RuleSetKey.FERIAS, FeriasInput(salario_base="3.000,00", dias_abono=5), resolved.config)
    print(result.get_summary())
    print()


def example_rescisao(resolver):
    print("=" * 60)
    print("Exemplo 2: Rescisão sem justa causa")
    print("=" * 60)

    resolved = resolver.resolve_active(RuleSetKey.RESCISAO)
    entrada = RescisaoInput(
        salario_base=3000,
        tipo_rescisao=TipoRescisao.SEM_JUSTA_CAUSA,
        anos_servico=2,
        dias_trabalhados_mes=15,
        meses_decimo_terceiro=6,
        dias_ferias_vencidas=30,
        saldo_fgts=10000
    )
    print(calculate(RuleSetKey.RESCISAO, entrada, resolved.config).get_summary())
    print()


def example_honorarios(resolver):
    """Honorários com RuleSet próprio do escritório (mínimo de R$ 600)"""
    print("=" * 60)
    print("Exemplo 3: Honorários com RuleSet do workspace")
    print("=" * 60)

    config = resolver.resolve_active(RuleSetKey.HONORARIOS).config
    config['baseMin'] = 600
    resolver.source.set_active(RuleSetKey.HONORARIOS, config, "escritorio-demo")

    resolved = resolver.resolve_active(RuleSetKey.HONORARIOS, "escritorio-demo")
    entrada = HonorariosInput(
        faturamento=30000,
        regime="LUCRO_PRESUMIDO",
        segmento="PRESTADOR",
        num_funcionarios=4,
        ponto_eletronico=True
    )
    result = calculate(RuleSetKey.HONORARIOS, entrada, resolved.config)
    print(result.get_summary())
    print(f"Padrão usado: {resolved.is_fallback}")
    print()


def example_simples(resolver):
    print("=" * 60)
    print("Exemplo 4: Fator R e Simples Nacional")
    print("=" * 60)

    fator_r = calculate(
        RuleSetKey.FATOR_R,
        FatorRInput(folha_12m=84000, receita_12m=300000),
        resolver.resolve_active(RuleSetKey.FATOR_R).config
    )
    print(fator_r.formula_text)

    config = resolver.resolve_active(RuleSetKey.SIMPLES_DAS).config
    for receita in (300000, 5000000):
        result = calculate(
            RuleSetKey.SIMPLES_DAS,
            SimplesInput(annex=fator_r.annex, receita_12m=receita, receita_mes=25000),
            config
        )
        if isinstance(result, BracketNotFound):
            print(f"Erro: {result.message}")
        else:
            print(result.get_summary())
            print(f"Alíquota efetiva: {result.details['effective_rate']}")
            print(f"DAS do mês: {result.details['das_mensal']}")
    print()


if __name__ == "__main__":
    resolver = ActiveRuleSetResolver(StaticConfigSource())

    example_ferias(resolver)
    example_rescisao(resolver)
    example_honorarios(resolver)
    example_simples(resolver)
