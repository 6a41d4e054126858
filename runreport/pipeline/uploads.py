"""Upload of run outputs to blob storage."""

from pathlib import Path
from typing import Iterable, List, Union

from rich.console import Console

from ..errors import UploadError
from ..models import RunReport
from ..runner import TaskRunner
from ..storage import BlobStore

console = Console()

REPORT_BLOB_NAME = "run_report.json"


def blob_prefix(project_name: str, run_name: str) -> str:
    """Get the blob path holding a run's outputs."""
    return f"{project_name}/outputs/{run_name}"


def store_run_data(
    runner: TaskRunner,
    store: BlobStore,
    report: RunReport,
    run_name: str,
    project_name: str,
    container_url: str,
    upload_targets: Iterable[str] = (),
    upload_folders: Iterable[Union[str, Path]] = (),
    forced: bool = False,
) -> List[str]:
    """
    Store task outputs, folders and the run report of a run.

    Args:
        runner: Task runner the outputs are read from
        store: Blob store
        report: Run report, always stored
        run_name: Run name
        project_name: Project name
        container_url: Blob container
        upload_targets: Names of tasks whose outputs are stored
        upload_folders: Local folders stored under their own name
        forced: Overwrite existing blobs

    Returns:
        Locations of every stored blob
    """
    prefix = blob_prefix(project_name, run_name)
    if not container_url:
        raise UploadError(prefix, "No container URL configured")

    stored: List[str] = []
    for name in upload_targets:
        console.print(f"Uploading '{name}'...")
        stored.append(
            store.store_data(
                runner.read_artifact(name),
                f"{prefix}/{name}.{runner.artifact_extension}",
                container_url,
                overwrite=forced,
            )
        )

    for folder in upload_folders:
        folder = Path(folder)
        console.print(f"Uploading folder '{folder.name}'...")
        stored.extend(store.store_folder(folder, f"{prefix}/{folder.name}", container_url, overwrite=forced))

    console.print("Uploading run report...")
    stored.append(store.store_data(report, f"{prefix}/{REPORT_BLOB_NAME}", container_url, overwrite=forced))
    return stored
