"""
Strategy jobs package.

Available entry points:
    python -m strategy.jobs.run_arb price --tier 500
    python -m strategy.jobs.run_arb execute --amount-wei 1000000000000000000

NOTE: This __init__.py does NOT import run_arb to avoid side effects
when importing the package. Import it directly when needed:

    from strategy.jobs.run_arb import cli
"""

__all__: list[str] = []
