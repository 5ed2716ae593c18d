"""Selects the remote store and file storage for each user session."""
import logging
from pathlib import Path
from typing import Optional

from sqlalchemy.orm import sessionmaker

from . import config
from .database import SessionLocal, init_db
from .schemas import UserAuth
from .store import FileStorage, LocalFileStorage, LocalStore, RemoteStore, RestStore, StorageApiFileStorage

logger = logging.getLogger(__name__)

LOCAL = "local"
REST = "rest"


class Backends:
    """
    Factory for the store and storage a dashboard talks to.

    ``local`` uses the SQLAlchemy database and a directory served under
    ``/files``; ``rest`` talks to the hosted backend with the user's token.
    """

    def __init__(
        self,
        kind: str = config.STORE_BACKEND,
        session_factory: Optional[sessionmaker] = None,
        upload_dir: str = config.UPLOAD_DIR,
        store_url: str = config.STORE_URL,
        api_key: str = config.STORE_API_KEY,
        bucket: str = config.STORAGE_BUCKET,
        timeout: float = config.REQUEST_TIMEOUT
    ):
        if kind not in (LOCAL, REST):
            raise ValueError(f"Unknown store backend '{kind}'")
        self.kind = kind
        self.session_factory = session_factory or SessionLocal
        self.upload_dir = upload_dir
        self.store_url = store_url
        self.api_key = api_key
        self.bucket = bucket
        self.timeout = timeout

    @property
    def is_local(self) -> bool:
        return self.kind == LOCAL

    def init(self):
        """Prepare local resources; the hosted backend needs nothing."""
        if not self.is_local:
            return
        init_db(bind=self.session_factory.kw.get("bind"))
        Path(self.upload_dir).mkdir(parents=True, exist_ok=True)
        logger.info(f"Local store ready, uploads in {self.upload_dir}")

    def store_for(self, user: UserAuth) -> RemoteStore:
        if self.is_local:
            return LocalStore(self.session_factory)
        return RestStore(self.store_url, self.api_key, access_token=user.access_token, timeout=self.timeout)

    def storage_for(self, user: UserAuth) -> FileStorage:
        if self.is_local:
            return LocalFileStorage(self.upload_dir, url_prefix=config.FILES_URL_PREFIX)
        return StorageApiFileStorage(
            self.store_url, self.api_key, self.bucket,
            access_token=user.access_token, timeout=self.timeout
        )
