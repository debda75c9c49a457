"""Firebase ID token verification for inbound calls."""

from __future__ import annotations

import threading
from typing import Any

import firebase_admin
from firebase_admin import auth as firebase_auth

from pharmnote.config.logger import get_logger
from pharmnote.core.errors import InternalError
from pharmnote.core.models import CallerIdentity

logger = get_logger(__name__)

_APP_LOCK = threading.Lock()


class FirebaseIdentityVerifier:
    """Turns a bearer token into a CallerIdentity, or None when it does not verify."""

    def __init__(self, project_id: str = "", check_revoked: bool = False):
        self.project_id = project_id
        self.check_revoked = check_revoked
        self._app: Any = None

    def _get_app(self) -> Any:
        if self._app is not None:
            return self._app
        with _APP_LOCK:
            try:
                self._app = firebase_admin.get_app()
            except ValueError:
                options = {"projectId": self.project_id} if self.project_id else None
                self._app = firebase_admin.initialize_app(options=options)
                logger.info("[auth] firebase app initialised project=%s", self.project_id or "default")
        return self._app

    def verify(self, token: str | None) -> CallerIdentity | None:
        if not token or not token.strip():
            return None
        try:
            claims = firebase_auth.verify_id_token(
                token,
                app=self._get_app(),
                check_revoked=self.check_revoked,
            )
        except (firebase_auth.InvalidIdTokenError, firebase_auth.UserDisabledError) as exc:
            logger.warning("[auth] token rejected: %s", exc.__class__.__name__)
            return None
        except Exception as exc:
            # Includes the SDK ValueError for a missing project id.
            logger.exception("[auth] token verification failed")
            raise InternalError.from_exception(exc) from exc

        uid = claims.get("uid") or claims.get("sub")
        if not uid:
            logger.warning("[auth] token has no uid claim")
            return None
        return CallerIdentity(uid=uid)
