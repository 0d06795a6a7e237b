"""Decoding and escaping of URL arguments."""

from __future__ import annotations

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class Url:
    """Decodes a URL component, filtering embedded NUL bytes."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.warning = ""

    def decode(self) -> str:
        """Decode ``+`` and ``%XX`` escapes; ``%00`` is dropped with a warning."""
        out = bytearray()
        text = self.url
        chars = iter(range(len(text)))
        for i in chars:
            char = text[i]
            if char == "+":
                out += b" "
            elif char == "%":
                pair = text[i + 1:i + 3]
                if len(pair) == 2 and all(c in _HEX_DIGITS for c in pair):
                    if pair == "00":
                        self.warning = f"Warning! Detected embedded NULL byte in URL: {text}"
                    else:
                        out.append(int(pair, 16))
                    next(chars)
                    next(chars)
                else:
                    out += b"%"
            else:
                out += char.encode("utf-8")
        return out.decode("utf-8", errors="replace")

    def escape(self) -> str:
        """Decode, then escape backslashes and double quotes for JSON output."""
        return self.decode().replace("\\", "\\\\").replace('"', '\\"')