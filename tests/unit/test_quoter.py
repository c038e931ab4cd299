"""Tests for the quoter implementations."""

import pytest

from swapcalc.constants import MAX_SQRT_RATIO, MIN_SQRT_RATIO, Q96
from swapcalc.errors import OracleFailure
from swapcalc.math.tick_math import get_sqrt_ratio_at_tick
from swapcalc.quoter import MockQuoter, QuoteKey, SimulatedQuoter, SwapQuote, Web3Quoter
from tests.helpers import ONE, TOKEN_A, TOKEN_B, TOKEN_C, make_pool


class TestMockQuoter:
    """Tests for MockQuoter."""

    def test_configured_quote(self):
        quote = SwapQuote(amount_out=42, sqrt_price_x96_after=Q96)
        quoter = MockQuoter(quotes={QuoteKey(TOKEN_A, TOKEN_B, 3000, 100): quote})
        assert quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, 100) == quote

    def test_key_ignores_address_case(self):
        quote = SwapQuote(amount_out=42, sqrt_price_x96_after=Q96)
        quoter = MockQuoter(quotes={QuoteKey(TOKEN_A.upper(), TOKEN_B, 3000, 100): quote})
        assert quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, 100) == quote

    def test_default_rate(self):
        quoter = MockQuoter(default_rate=(3, 2), sqrt_price_x96=Q96)
        quote = quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, 101)
        assert quote.amount_out == 151
        assert quote.sqrt_price_x96_after == Q96

    def test_unconfigured_raises(self):
        with pytest.raises(OracleFailure):
            MockQuoter().quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, 100)

    def test_records_calls(self):
        quoter = MockQuoter(default_rate=(1, 1))
        quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 500, 7, sqrt_price_limit_x96=9)
        assert quoter.calls == [(TOKEN_A, TOKEN_B, 500, 7, 9)]


class TestSimulatedQuoter:
    """Tests for SimulatedQuoter."""

    @pytest.fixture
    def quoter(self):
        return SimulatedQuoter(make_pool(liquidity=10**24))

    def test_token0_in_moves_price_down(self, quoter):
        quote = quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, ONE)
        assert quote.sqrt_price_x96_after < Q96
        # Fee and price impact both cost something at par
        assert 0 < quote.amount_out < ONE

    def test_token1_in_moves_price_up(self, quoter):
        quote = quoter.quote_exact_input_single(TOKEN_B, TOKEN_A, 3000, ONE)
        assert quote.sqrt_price_x96_after > Q96
        assert 0 < quote.amount_out < ONE

    def test_deterministic(self, quoter):
        first = quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, ONE)
        second = quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, ONE)
        assert first == second

    def test_zero_limit_means_extreme_price(self, quoter):
        unlimited = quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, ONE)
        limited = quoter.quote_exact_input_single(
            TOKEN_A, TOKEN_B, 3000, ONE, sqrt_price_limit_x96=MIN_SQRT_RATIO + 1
        )
        assert unlimited == limited

    def test_limit_caps_swap(self, quoter):
        """A large swap stops at the limit price and returns less than the full input would."""
        limit = get_sqrt_ratio_at_tick(-60)
        quote = quoter.quote_exact_input_single(
            TOKEN_A, TOKEN_B, 3000, 10**24, sqrt_price_limit_x96=limit
        )
        assert quote.sqrt_price_x96_after == limit

    @pytest.mark.parametrize(
        "token_in,token_out,limit",
        [
            (TOKEN_A, TOKEN_B, Q96 + 1),  # token0 in needs a limit below the price
            (TOKEN_B, TOKEN_A, Q96 - 1),
            (TOKEN_A, TOKEN_B, MIN_SQRT_RATIO),
            (TOKEN_B, TOKEN_A, MAX_SQRT_RATIO),
        ],
    )
    def test_invalid_limit_raises(self, quoter, token_in, token_out, limit):
        with pytest.raises(OracleFailure, match="Price limit"):
            quoter.quote_exact_input_single(
                token_in, token_out, 3000, ONE, sqrt_price_limit_x96=limit
            )

    def test_fee_mismatch_raises(self, quoter):
        with pytest.raises(OracleFailure, match="fee"):
            quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 500, ONE)

    def test_unknown_token_raises(self, quoter):
        with pytest.raises(OracleFailure):
            quoter.quote_exact_input_single(TOKEN_C, TOKEN_B, 3000, ONE)

    def test_wrong_counterpart_raises(self, quoter):
        with pytest.raises(OracleFailure):
            quoter.quote_exact_input_single(TOKEN_A, TOKEN_C, 3000, ONE)

    def test_no_liquidity_raises(self):
        quoter = SimulatedQuoter(make_pool(liquidity=0))
        with pytest.raises(OracleFailure, match="liquidity"):
            quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, ONE)

    def test_records_calls(self, quoter):
        quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, ONE)
        assert quoter.calls == [(TOKEN_A, ONE, 0)]


class TestWeb3QuoterErrors:
    """Web3Quoter wraps RPC errors without needing a live node."""

    def test_unreachable_rpc_raises_oracle_failure(self):
        pytest.importorskip("web3")
        quoter = Web3Quoter("http://127.0.0.1:9")
        with pytest.raises(OracleFailure, match="QuoterV2 call failed"):
            quoter.quote_exact_input_single(TOKEN_A, TOKEN_B, 3000, ONE)
