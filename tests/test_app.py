# tests/test_app.py

"""Smoke tests for the TUI application using Textual's Pilot."""

import unittest
from typing import cast
from unittest.mock import AsyncMock, MagicMock, patch

from textual.widgets import Checkbox, DataTable, Input, Select, Static

from src.models.errors import ConfigurationError
from src.models.product import Product, Shipping
from src.models.search_filters import SortOrder
from src.services.search_service import SearchResult
from src.ui.app import AffiliateSearchApp

FAKE_PRODUCTS = [
    Product(
        id="MLB1",
        title="Notebook Lenovo",
        price=2400.0,
        original_price=3000.0,
        thumbnail="http://img/1-I.jpg",
        permalink="https://produto.mercadolivre.com.br/MLB-1-_JM",
        shipping=Shipping(free_shipping=True),
        discount=20,
    ),
    Product(
        id="MLB2",
        title="Notebook Dell",
        price=1234.5,
        permalink="https://produto.mercadolivre.com.br/MLB-2-_JM",
    ),
]


def _service(result: SearchResult | None = None) -> MagicMock:
    service = MagicMock()
    service.search = AsyncMock(
        return_value=result
        or SearchResult(query="notebook", products=list(FAKE_PRODUCTS))
    )
    service.get_deals = AsyncMock(
        return_value=SearchResult(query="", products=FAKE_PRODUCTS[:1])
    )
    return service


class TestAffiliateSearchApp(unittest.IsolatedAsyncioTestCase):
    """Smoke tests for the Textual TUI."""

    async def test_app_composes_without_crash(self) -> None:
        """All core widgets are mounted."""
        app = AffiliateSearchApp(service=_service(), affiliate_tag="promo")
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input)
            app.query_one("#search_btn")
            app.query_one("#results_table", DataTable)
            app.query_one("#sort_select", Select)
            app.query_one("#free_shipping", Checkbox)
            app.query_one("#phone_input", Input)
            await pilot.pause()

    async def test_empty_query_does_not_search(self) -> None:
        service = _service()
        app = AffiliateSearchApp(service=service, affiliate_tag="promo")
        async with app.run_test(notifications=True) as pilot:
            await pilot.click("#search_btn")
            await pilot.pause()
            service.search.assert_not_called()
            self.assertEqual(app.products, [])

    async def test_search_populates_table(self) -> None:
        service = _service()
        app = AffiliateSearchApp(service=service, affiliate_tag="promo")
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input).value = "notebook"
            await pilot.click("#search_btn")
            await pilot.pause()

            self.assertEqual(len(app.products), 2)
            table = cast(
                DataTable[str],
                app.query_one("#results_table", DataTable),
            )
            self.assertEqual(table.row_count, 2)
            query = service.search.call_args.args[0]
            self.assertEqual(query, "notebook")

    async def test_filters_read_from_widgets(self) -> None:
        service = _service()
        app = AffiliateSearchApp(service=service, affiliate_tag="promo")
        async with app.run_test() as pilot:
            app.query_one("#sort_select", Select).value = "price_asc"
            app.query_one("#condition_select", Select).value = "used"
            app.query_one("#free_shipping", Checkbox).value = True
            await pilot.pause()

            filters = app.current_filters()

            self.assertEqual(filters.sort, SortOrder.PRICE_ASC)
            self.assertEqual(filters.condition, "used")
            self.assertTrue(filters.free_shipping)
            self.assertFalse(filters.discount)

    async def test_filter_change_reruns_search(self) -> None:
        service = _service()
        app = AffiliateSearchApp(service=service, affiliate_tag="promo")
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input).value = "notebook"
            await pilot.click("#search_btn")
            await pilot.pause()
            calls_before = service.search.await_count

            app.query_one("#discount", Checkbox).value = True
            await pilot.pause()
            await pilot.pause()

            self.assertGreater(service.search.await_count, calls_before)
            self.assertTrue(service.search.call_args.args[1].discount)

    async def test_error_result_clears_table(self) -> None:
        error = ConfigurationError("missing")
        failed = SearchResult(
            query="x", error=error, user_message="Configure credentials"
        )
        app = AffiliateSearchApp(service=_service(failed), affiliate_tag="t")
        async with app.run_test(notifications=True) as pilot:
            app.query_one("#search_input", Input).value = "x"
            await pilot.click("#search_btn")
            await pilot.pause()

            self.assertEqual(app.products, [])
            status = app.query_one("#status", Static)
            self.assertIn("Configure credentials", str(status.render()))

    async def test_copy_message_uses_clipboard(self) -> None:
        app = AffiliateSearchApp(service=_service(), affiliate_tag="promo")
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input).value = "notebook"
            await pilot.click("#search_btn")
            await pilot.pause()

            with patch(
                "src.ui.app.copy_to_clipboard", return_value=True
            ) as mock_copy:
                app.action_copy_message()

            text = mock_copy.call_args.args[0]
            self.assertTrue(text.startswith("http://img/1-O.jpg\n\n"))
            self.assertIn("tag=promo", text)
            self.assertIn("Frete GRÁTIS", text)

    async def test_share_whatsapp_uses_phone(self) -> None:
        app = AffiliateSearchApp(service=_service(), affiliate_tag="promo")
        async with app.run_test() as pilot:
            app.query_one("#search_input", Input).value = "notebook"
            await pilot.click("#search_btn")
            await pilot.pause()
            app.query_one("#phone_input", Input).value = "+55 11 99999-9999"

            with patch(
                "src.ui.app.open_share_url", return_value=True
            ) as mock_open:
                app.action_share_whatsapp()

            url = mock_open.call_args.args[0]
            self.assertTrue(
                url.startswith("https://wa.me/5511999999999?text=")
            )

    async def test_share_without_selection_warns(self) -> None:
        app = AffiliateSearchApp(service=_service(), affiliate_tag="promo")
        async with app.run_test(notifications=True) as pilot:
            with patch("src.ui.app.open_share_url") as mock_open:
                app.action_share_whatsapp()
            mock_open.assert_not_called()
            await pilot.pause()

    async def test_load_deals(self) -> None:
        service = _service()
        app = AffiliateSearchApp(service=service, affiliate_tag="promo")
        async with app.run_test() as pilot:
            await app.action_load_deals()
            await pilot.pause()

            service.get_deals.assert_awaited_once()
            self.assertEqual(len(app.products), 1)

    async def test_missing_tag_warning_shown(self) -> None:
        app = AffiliateSearchApp(service=_service(), affiliate_tag="")
        async with app.run_test() as pilot:
            warning = app.query_one("#tag_warning", Static)
            self.assertIn("ML_AFFILIATE_TAG", str(warning.render()))
            await pilot.pause()


if __name__ == "__main__":
    unittest.main()
