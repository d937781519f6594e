# PATH: tests/unit/test_imports_contract.py
"""
Import contract smoke tests.

PURPOSE: Catch ImportError regressions EARLY.
RUN FIRST: python -m pytest tests/unit/test_imports_contract.py -v
"""

import importlib
import unittest

PACKAGE_MODULES = [
    "core",
    "core.constants",
    "core.exceptions",
    "core.logging",
    "core.math",
    "core.models",
    "core.time",
    "core.validators",
    "chains",
    "chains.providers",
    "config",
    "dex",
    "dex.venue",
    "dex.pool_locator",
    "dex.price_feed",
    "dex.adapters",
    "dex.adapters.paper",
    "dex.adapters.uniswap_v3",
    "execution",
    "execution.access_guard",
    "execution.engine",
    "execution.state_machine",
    "execution.swap_executor",
    "strategy",
    "strategy.decider",
    "strategy.jobs",
    "strategy.jobs.run_arb",
]


class TestModuleImports(unittest.TestCase):

    def test_every_module_imports(self):
        for name in PACKAGE_MODULES:
            with self.subTest(module=name):
                importlib.import_module(name)

    def test_package_exports_resolve(self):
        """Every name in __all__ actually exists."""
        for name in ("core", "chains", "dex", "dex.adapters", "execution", "strategy"):
            module = importlib.import_module(name)
            for export in getattr(module, "__all__", []):
                with self.subTest(module=name, export=export):
                    self.assertTrue(hasattr(module, export))


class TestVenueProtocols(unittest.TestCase):
    """Concrete venues satisfy the runtime-checkable protocols."""

    def test_paper_venue_is_exchange_venue(self):
        from dex.adapters.paper import PaperVenue
        from dex.venue import ExchangeVenue

        self.assertIsInstance(PaperVenue(holder="0x" + "ab" * 20), ExchangeVenue)

    def test_reader_is_read_only(self):
        from unittest.mock import MagicMock

        from dex.adapters.uniswap_v3 import UniswapV3Reader
        from dex.venue import BalanceProvider, PoolRegistry, PriceOracle, SwapRouter

        reader = UniswapV3Reader(MagicMock(), "0x" + "1f" * 20, "0x" + "ab" * 20)
        self.assertIsInstance(reader, PoolRegistry)
        self.assertIsInstance(reader, PriceOracle)
        self.assertIsInstance(reader, BalanceProvider)
        self.assertNotIsInstance(reader, SwapRouter)


if __name__ == "__main__":
    unittest.main()
