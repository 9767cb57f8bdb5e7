"""
Viewer identity for a request.

Authentication happens upstream; the gateway forwards the signed-in user's
id in the X-User-Id header. Routers pass the resolved id explicitly into
every service call; a missing header means "no session".
"""
from typing import Optional

from fastapi import Header


async def get_viewer_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> Optional[str]:
    return x_user_id or None
