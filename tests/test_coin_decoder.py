import json
import unittest

from coin_search.core.errors import ParsingError
from coin_search.core.types import CoinSearchResponse
from coin_search.modules.coin_search.decoder import decode, decode_coin_response


def _coin(coin_id: str, **overrides):
    payload = {
        "id": coin_id,
        "name": coin_id.title(),
        "api_symbol": coin_id,
        "symbol": coin_id[:3].upper(),
        "market_cap_rank": 1,
        "thumb": f"https://assets.example/{coin_id}/thumb.png",
        "large": f"https://assets.example/{coin_id}/large.png",
    }
    payload.update(overrides)
    return payload


class CoinDecoderTest(unittest.TestCase):
    def test_decodes_records_in_response_order(self):
        body = json.dumps(
            {"coins": [_coin("bitcoin"), _coin("bitcoin-cash"), _coin("wrapped-bitcoin")]}
        ).encode("utf-8")

        response = decode_coin_response(body)

        self.assertEqual(
            [coin.id for coin in response.coins],
            ["bitcoin", "bitcoin-cash", "wrapped-bitcoin"],
        )

    def test_empty_coins_array(self):
        response = decode_coin_response(b'{"coins": []}')
        self.assertEqual(response.coins, [])

    def test_missing_or_null_rank_is_none(self):
        absent = _coin("tiny")
        del absent["market_cap_rank"]
        body = json.dumps({"coins": [absent, _coin("null-rank", market_cap_rank=None)]})

        response = decode_coin_response(body)

        self.assertIsNone(response.coins[0].market_cap_rank)
        self.assertIsNone(response.coins[1].market_cap_rank)

    def test_extra_envelope_keys_are_ignored(self):
        body = json.dumps({"coins": [_coin("ethereum")], "exchanges": [], "nfts": []})
        response = decode_coin_response(body)
        self.assertEqual(len(response.coins), 1)

    def test_malformed_json_raises_parsing_error(self):
        with self.assertRaises(ParsingError) as ctx:
            decode_coin_response(b'{"coins": [')
        self.assertIn("CoinSearchResponse", ctx.exception.description)

    def test_invalid_utf8_raises_parsing_error(self):
        with self.assertRaises(ParsingError):
            decode_coin_response(b'{"coins": ["\xff\xfe"]}')

    def test_rank_type_mismatch_raises_parsing_error(self):
        body = json.dumps({"coins": [_coin("bitcoin"), _coin("ethereum", market_cap_rank="2")]})
        with self.assertRaises(ParsingError) as ctx:
            decode_coin_response(body)
        self.assertIn("market_cap_rank", str(ctx.exception))

    def test_string_field_type_mismatch_raises_parsing_error(self):
        body = json.dumps({"coins": [_coin("bitcoin", id=1)]})
        with self.assertRaises(ParsingError):
            decode_coin_response(body)

    def test_missing_required_field_raises_parsing_error(self):
        broken = _coin("bitcoin")
        del broken["thumb"]
        with self.assertRaises(ParsingError) as ctx:
            decode_coin_response(json.dumps({"coins": [broken]}))
        self.assertIn("thumb", ctx.exception.description)

    def test_missing_envelope_raises_parsing_error(self):
        with self.assertRaises(ParsingError):
            decode_coin_response(b"[]")
        with self.assertRaises(ParsingError):
            decode_coin_response(b"{}")

    def test_generic_decode_uses_given_model(self):
        response = decode('{"coins": []}', CoinSearchResponse)
        self.assertIsInstance(response, CoinSearchResponse)


if __name__ == "__main__":
    unittest.main()
