"""
Deploy pipeline: archive → upload → remote unpack
"""
import shlex
import tempfile
from pathlib import Path
from typing import Optional

from ...core.client import RemoteClient
from ...core.constants import APPS_ARCHIVE_NAME, CFG_ARCHIVE_NAME
from ...core.interfaces import OutputSink, LoggerSink
from ...core.logging import get_logger
from ...core.utils import ErrorPolicy, run_guarded
from .archiver import archive_directory
from .models import DeployConfig

logger = get_logger(__name__)


def build_unpack_command(remote_dir: str, archive_name: str) -> str:
    """
    Build the remote command that unpacks an uploaded archive over
    ``remote_dir`` and then deletes it.
    """
    name = shlex.quote(archive_name)
    return f"cd {shlex.quote(remote_dir)} && tar -xzvf {name} && rm -f {name}"


def remote_path(remote_dir: str, name: str) -> str:
    return f"{remote_dir.rstrip('/')}/{name}"


class DeployPipeline:
    """
    Push the local apps and config-home trees to the remote host.

    Steps run strictly in order and the first failure aborts the run:
    1. archive apps      2. archive config home
    3. upload apps       4. upload config home
    5. unpack apps       6. unpack config home
    7. delete local scratch archives (best effort)
    """
    
    def __init__(
        self,
        client: RemoteClient,
        config: DeployConfig,
        sink: Optional[OutputSink] = None,
        scratch_dir: Optional[Path] = None,
    ):
        """
        Initialize deploy pipeline.
        
        Args:
            client: Connected RemoteClient
            config: Deploy configuration
            sink: Receives streamed remote output
            scratch_dir: Where local archives are written (default: paths.scratch_dir or system temp)
        """
        self.client = client
        self.config = config
        self.sink = sink or LoggerSink()
        if scratch_dir is None:
            scratch_dir = config.paths.scratch_dir or tempfile.gettempdir()
        self.scratch_dir = Path(scratch_dir).expanduser()
    
    def run(self) -> None:
        paths = self.config.paths
        apps_archive = self.scratch_dir / APPS_ARCHIVE_NAME
        cfg_archive = self.scratch_dir / CFG_ARCHIVE_NAME
        
        # Step 1-2: Archive
        archive_directory(paths.local_apps, apps_archive)
        logger.info(f"Packed {paths.local_apps} → {apps_archive}")
        archive_directory(paths.local_cfg_home, cfg_archive)
        logger.info(f"Packed {paths.local_cfg_home} → {cfg_archive}")
        
        # Step 3-4: Upload
        self.client.upload(apps_archive, remote_path(paths.remote_apps, APPS_ARCHIVE_NAME))
        logger.info(f"Uploaded {APPS_ARCHIVE_NAME} to {paths.remote_apps}")
        self.client.upload(cfg_archive, remote_path(paths.remote_cfg_home, CFG_ARCHIVE_NAME))
        logger.info(f"Uploaded {CFG_ARCHIVE_NAME} to {paths.remote_cfg_home}")
        
        # Step 5-6: Unpack over the remote trees and drop the uploaded archives
        self.client.exec_streamed(
            build_unpack_command(paths.remote_apps, APPS_ARCHIVE_NAME), self.sink
        )
        logger.info(f"Unpacked and removed {remote_path(paths.remote_apps, APPS_ARCHIVE_NAME)}")
        self.client.exec_streamed(
            build_unpack_command(paths.remote_cfg_home, CFG_ARCHIVE_NAME), self.sink
        )
        logger.info(f"Unpacked and removed {remote_path(paths.remote_cfg_home, CFG_ARCHIVE_NAME)}")
        
        # Step 7: Local cleanup
        for archive in (apps_archive, cfg_archive):
            run_guarded(ErrorPolicy.BEST_EFFORT, f"Removing {archive}", archive.unlink)


def deploy_assets(
    client: RemoteClient,
    config: DeployConfig,
    sink: Optional[OutputSink] = None,
) -> None:
    """Run the deploy pipeline once on an open session"""
    DeployPipeline(client, config, sink).run()
