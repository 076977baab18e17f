import mimetypes
import os

from starlette.exceptions import HTTPException
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

# Platform mime tables disagree on .js; browsers expect this one
mimetypes.add_type("application/javascript", ".js")


class PublicFiles(StaticFiles):
    """StaticFiles that answers 403 for paths escaping the public directory."""

    async def get_response(self, path: str, scope: Scope):
        if os.path.isabs(path) or path == os.pardir or path.startswith(os.pardir + os.sep):
            raise HTTPException(status_code=403, detail="Forbidden")
        return await super().get_response(path, scope)
