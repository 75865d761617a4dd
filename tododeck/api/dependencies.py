from fastapi import Request

async def request_body(request: Request) -> bytes:
    """Raw request body, so JSON:API envelopes can be checked before pydantic sees them"""
    return await request.body()
