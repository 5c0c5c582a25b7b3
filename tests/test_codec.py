"""Unit tests for kvstorage/storage/codec.py"""
from __future__ import annotations

import pytest


class TestEncodeValue:

    def test_compact_output(self):
        from kvstorage.storage.codec import encode_value
        assert encode_value({"a": [1, 2], "b": None}) == '{"a":[1,2],"b":null}'

    def test_non_ascii_escaped(self):
        from kvstorage.storage.codec import decode_value, encode_value
        text = encode_value("日本")
        assert text == '"\\u65e5\\u672c"'
        assert decode_value(text) == "日本"

    def test_lone_surrogate_survives(self):
        from kvstorage.storage.codec import decode_value, encode_value
        text = encode_value({"s": "\ud800"})
        assert text.isascii()
        assert decode_value(text) == {"s": "\ud800"}

    @pytest.mark.parametrize("value", [object(), float("nan"), float("-inf"), {"k": b"bytes"}])
    def test_rejects_non_json(self, value):
        from kvstorage import SerializationError
        from kvstorage.storage.codec import encode_value
        with pytest.raises(SerializationError):
            encode_value(value)

    def test_error_is_value_error(self):
        from kvstorage.storage.codec import encode_value
        with pytest.raises(ValueError):
            encode_value({"when": object()})


class TestDecodeValue:

    def test_decodes_json(self):
        from kvstorage.storage.codec import decode_value
        assert decode_value('{"a":[1,2.5,"x",true]}') == {"a": [1, 2.5, "x", True]}

    def test_null_column_is_empty_dict(self):
        from kvstorage.storage.codec import decode_value
        assert decode_value(None) == {}

    def test_json_null_is_none(self):
        from kvstorage.storage.codec import decode_value
        assert decode_value("null") is None

    def test_invalid_json_raises(self):
        from kvstorage import SerializationError
        from kvstorage.storage.codec import decode_value
        with pytest.raises(SerializationError):
            decode_value("{broken")
