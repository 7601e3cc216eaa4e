"""
Extract File Transport

Delivers generated extract files to the benefits partner.
"""

import asyncio
import logging
import posixpath
import shutil
from pathlib import Path
from typing import Optional, Union

import asyncssh

logger = logging.getLogger(__name__)


class SftpTransport:
    """Uploads files over SFTP, one connection per delivery"""

    def __init__(
        self,
        host: str,
        port: int = 22,
        username: Optional[str] = None,
        password: Optional[str] = None,
        remote_dir: str = "",
        known_hosts: Optional[str] = None,
        verify_host_key: bool = True,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.remote_dir = remote_dir
        self.known_hosts = known_hosts
        self.verify_host_key = verify_host_key
        if not verify_host_key:
            logger.warning(f"SFTP host key verification disabled for {host}")

    def _connect_options(self) -> dict:
        options = {
            "port": self.port,
            "username": self.username,
            "password": self.password,
        }
        if not self.verify_host_key:
            options["known_hosts"] = None
        elif self.known_hosts:
            options["known_hosts"] = self.known_hosts
        return options

    def remote_path(self, remote_name: str) -> str:
        if not self.remote_dir:
            return remote_name
        return posixpath.join(self.remote_dir, remote_name)

    async def deliver(self, local_path: Path, remote_name: str) -> bool:
        """Upload local_path as remote_name; False on any SFTP/SSH failure"""
        remote = self.remote_path(remote_name)
        try:
            async with asyncssh.connect(self.host, **self._connect_options()) as conn:
                async with conn.start_sftp_client() as sftp:
                    await sftp.put(str(local_path), remote)
        except (OSError, asyncssh.Error) as e:
            logger.error(f"SFTP upload of {remote} failed: {e}")
            return False
        logger.info(f"Uploaded {local_path.name} to sftp://{self.host}/{remote}")
        return True


class LocalDirectoryTransport:
    """Copies files into an outbox directory (development and testing)"""

    def __init__(self, outbox_dir: Union[str, Path]):
        self.outbox_dir = Path(outbox_dir)

    async def deliver(self, local_path: Path, remote_name: str) -> bool:
        target = self.outbox_dir / remote_name
        try:
            await asyncio.to_thread(self._copy, Path(local_path), target)
        except OSError as e:
            logger.error(f"Copy of {local_path} to outbox failed: {e}")
            return False
        logger.info(f"Delivered {remote_name} to {self.outbox_dir}")
        return True

    @staticmethod
    def _copy(source: Path, target: Path) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, target)


__all__ = ["SftpTransport", "LocalDirectoryTransport"]
