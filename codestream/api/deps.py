from fastapi import Request

from codestream.providers.factory import AdapterMap


def get_adapters(request: Request) -> AdapterMap:
    return request.app.state.adapters
