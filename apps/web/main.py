"""FastAPI web application for depbump."""

from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from pydantic import BaseModel

from core.datasource import get_datasource_ids, get_pkg_releases
from core.detect import identify
from core.errors import DepbumpError
from core.lookup import LookupWorker
from core.managers import SUPPORTED_DATASOURCES, extract_package_file
from core.update import build_update_report

app = FastAPI(
    title="depbump",
    description="Find dependency updates across package registries",
    version="0.1.0",
)


class UpdateRequest(BaseModel):
    """Request model for updating dependencies."""
    content: str
    filename: Optional[str] = None
    python_version: Optional[str] = None
    manager: Optional[str] = None


class UpdateResponse(BaseModel):
    """Response model for dependency updates."""
    original_content: str
    updated_content: str
    diff: str
    changes: list[dict]
    notes: list[str]
    has_changes: bool
    manager: str


class ReleasesResponse(BaseModel):
    datasource: str
    package: str
    releases: list[str]


@app.get("/health")
async def health():
    return {
        "status": "ok",
        "datasources": get_datasource_ids(),
        "managers": SUPPORTED_DATASOURCES,
    }


@app.get("/api/releases/{datasource}", response_model=ReleasesResponse)
async def releases(datasource: str, package: str, registry_url: Optional[str] = None):
    """List releases of a package from one datasource."""
    try:
        result = await get_pkg_releases(
            datasource, package, [registry_url] if registry_url else None
        )
    except DepbumpError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not result:
        raise HTTPException(status_code=404, detail=f"No releases found for {package}")

    return ReleasesResponse(
        datasource=datasource,
        package=package,
        releases=[release.version for release in result.releases],
    )


@app.post("/api/update", response_model=UpdateResponse)
async def update_dependencies(request: UpdateRequest):
    """Compute updates for manifest content."""
    try:
        content = request.content.strip()
        if not content:
            raise HTTPException(status_code=400, detail="No content provided")

        manager = request.manager or identify(content, request.filename)
        if manager == "unknown":
            raise HTTPException(status_code=400, detail="Could not detect manifest type")

        manifest = extract_package_file(manager, content)
        if not manifest.entries:
            raise HTTPException(status_code=400, detail="No dependencies found to update")

        worker = LookupWorker(python_version=request.python_version)
        candidates = await worker.lookup_entries(manifest.entries)
        report = build_update_report(request.filename or "manifest", manager, content, candidates)

        # Format changes for UI
        changes = [
            {
                "name": candidate.entry.name,
                "datasource": candidate.entry.datasource,
                "current_version": candidate.entry.current_value or candidate.entry.spec or "unspecified",
                "new_version": candidate.new_version,
                "reason": candidate.reason,
                "update_type": candidate.update_type,
                "has_change": candidate.has_change,
            }
            for candidate in candidates
        ]

        return UpdateResponse(
            original_content=content,
            updated_content=report.updated_content,
            diff=report.diff,
            changes=changes,
            notes=report.notes,
            has_changes=report.has_changes,
            manager=manager,
        )

    except HTTPException:
        # Re-raise HTTP exceptions (don't convert to 500)
        raise
    except DepbumpError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error processing dependencies: {str(e)}")


@app.post("/api/upload", response_model=UpdateResponse)
async def upload_file(
    file: UploadFile = File(...),
    python_version: Optional[str] = Form(None),
    manager: Optional[str] = Form(None),
):
    """Upload and process a manifest file."""
    try:
        if not file.filename:
            raise HTTPException(status_code=400, detail="No file uploaded")

        content = await file.read()
        text_content = content.decode("utf-8")

        request = UpdateRequest(
            content=text_content,
            filename=file.filename,
            python_version=python_version,
            manager=manager,
        )

        return await update_dependencies(request)

    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="File must be valid UTF-8 text")
    except HTTPException:
        # Re-raise HTTP exceptions
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error processing file: {str(e)}")
