"""
tokenizer.py: Real BPE tokenization via tiktoken.

gpt-4o uses o200k_base; gpt-4 and gpt-3.5-turbo use cl100k_base. Each
token is returned with the text it decodes to. Tokens that split a
multi-byte character decode to U+FFFD, matching what a browser
TextDecoder shows.
"""

from functools import lru_cache

import tiktoken

from devflow_api.models.ai import TokenizeResult, TokenSegment

_ENCODING_FOR_MODEL = {
    "gpt-4o": "o200k_base",
    "o200k_base": "o200k_base",
    "gpt-4": "cl100k_base",
    "gpt-3.5-turbo": "cl100k_base",
    "cl100k_base": "cl100k_base",
}


@lru_cache(maxsize=4)
def _get_encoding(encoding_name: str):
    # First use downloads the BPE ranks; cached on disk by tiktoken after that.
    return tiktoken.get_encoding(encoding_name)


def tokenize(text: str, model: str) -> TokenizeResult:
    encoding = _get_encoding(_ENCODING_FOR_MODEL.get(model, "o200k_base"))
    # Special-token strings in user text are tokenized as plain text
    token_ids = encoding.encode(text, disallowed_special=())

    segments = [
        TokenSegment(
            text=encoding.decode_single_token_bytes(token_id).decode("utf-8", errors="replace"),
            token_id=token_id,
        )
        for token_id in token_ids
    ]
    return TokenizeResult(segments=segments, total_tokens=len(token_ids), model=model)
