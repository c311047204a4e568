from typing import Optional

from fastapi import Request


def current_actor(request: Request) -> Optional[str]:
    """Username an upstream authentication layer left on the request, if any."""
    return getattr(request.state, 'username', None) or None
