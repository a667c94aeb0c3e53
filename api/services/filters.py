"""Request filter decoding for API endpoints."""

from fastapi import HTTPException, Request

from src.filtering import FilterCodecError, FilterState, decode


def filters_from_request(request: Request) -> FilterState:
    """Decode the URL codec keys from the request query string.

    The raw query string is decoded so that repeated keys resolve exactly as
    they do in the browser (first value wins). Endpoint options sharing the
    query string are ignored by the codec.

    Raises:
        HTTPException: 400 if a date bound is malformed.
    """
    try:
        return decode(str(request.url.query))
    except FilterCodecError as e:
        raise HTTPException(status_code=400, detail=str(e))
