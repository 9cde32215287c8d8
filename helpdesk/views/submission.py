"""Public ticket form.

``ImageSelection`` holds the queued attachments and their previews,
``TicketSubmission`` drives one submission from validation through the
sequential uploads to the intake call. The routes at the bottom render the
form around them.
"""
from __future__ import annotations

import base64
import mimetypes
import re
import secrets
from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePath

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Request, UploadFile

from helpdesk.api.deps import get_blob_storage, get_ticket_intake
from helpdesk.core.config import settings
from helpdesk.core.errors import HelpdeskError, UploadError, ValidationError
from helpdesk.schemas.ticket import TicketCreate, TicketOut
from helpdesk.services.intake import REQUIRED_FIELDS, TicketIntake
from helpdesk.services.storage import BlobStorage
from helpdesk.utils.time import epoch_ms
from helpdesk.views.templating import templates

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["views"])

SUCCESS_MESSAGE = "Ticket submitted successfully! We'll get back to you soon."
_EXTENSION = re.compile(r"^[a-z0-9]{1,10}$")


@dataclass
class ImageFile:
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def extension(self) -> str:
        suffix = PurePath(self.filename).suffix.lstrip(".").lower()
        if _EXTENSION.match(suffix):
            return suffix
        guessed = mimetypes.guess_extension(self.content_type or "") or ""
        return guessed.lstrip(".") or "bin"

    @property
    def preview_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"


def check_image(image: ImageFile, max_bytes: int) -> str | None:
    if not (image.content_type or "").startswith("image/"):
        return f"{image.filename} is not an image file"
    if image.size > max_bytes:
        limit_mb = max_bytes // (1024 * 1024)
        return f"{image.filename} is too large (max {limit_mb}MB)"
    return None


class ImageSelection:
    def __init__(self, max_bytes: int | None = None) -> None:
        self.max_bytes = max_bytes or settings.MAX_IMAGE_BYTES
        self.files: list[ImageFile] = []

    def add(self, images: list[ImageFile]) -> list[str]:
        """Queue the acceptable images; return a message per rejected one."""
        rejections = []
        for image in images:
            problem = check_image(image, self.max_bytes)
            if problem:
                rejections.append(problem)
                continue
            self.files.append(image)
        return rejections

    def remove(self, index: int) -> None:
        if 0 <= index < len(self.files):
            del self.files[index]

    def clear(self) -> None:
        self.files.clear()

    @property
    def previews(self) -> list[str]:
        return [image.preview_url for image in self.files]


class SubmissionState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    UPLOADING_IMAGES = "uploading_images"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


PENDING_STATES = {
    SubmissionState.VALIDATING,
    SubmissionState.UPLOADING_IMAGES,
    SubmissionState.SUBMITTING,
}


@dataclass
class Message:
    kind: str
    text: str


@dataclass
class TicketSubmission:
    intake: TicketIntake
    storage: BlobStorage
    bucket: str = field(default_factory=lambda: settings.IMAGE_BUCKET)
    images: ImageSelection = field(default_factory=ImageSelection)
    form: dict[str, str] = field(default_factory=lambda: dict.fromkeys(REQUIRED_FIELDS, ""))
    state: SubmissionState = SubmissionState.IDLE
    message: Message | None = None
    ticket: TicketOut | None = None
    error: HelpdeskError | None = None

    @property
    def pending(self) -> bool:
        return self.state in PENDING_STATES

    def select_images(self, images: list[ImageFile]) -> list[str]:
        rejections = self.images.add(images)
        if rejections:
            self.message = Message("error", " ".join(rejections))
        return rejections

    def reset(self) -> None:
        self.form = dict.fromkeys(REQUIRED_FIELDS, "")
        self.images.clear()
        self.state = SubmissionState.IDLE

    async def upload_images(self) -> list[str]:
        urls = []
        for image in self.images.files:
            path = f"{secrets.token_hex(6)}-{epoch_ms()}.{image.extension}"
            try:
                await self.storage.upload(self.bucket, path, image.data)
            except UploadError as exc:
                raise UploadError(f"Failed to upload {image.filename}") from exc
            urls.append(self.storage.get_public_url(self.bucket, path))
        return urls

    async def submit(self, form: dict[str, str], background_tasks: BackgroundTasks) -> bool:
        if self.pending:
            raise ValidationError("A submission is already in progress")

        self.form = {key: form.get(key) or "" for key in REQUIRED_FIELDS}
        self.message = None
        self.ticket = None
        self.error = None
        self.state = SubmissionState.VALIDATING
        try:
            if not all(value.strip() for value in self.form.values()):
                raise ValidationError("All fields are required")

            image_urls: list[str] = []
            if self.images.files:
                self.state = SubmissionState.UPLOADING_IMAGES
                image_urls = await self.upload_images()

            self.state = SubmissionState.SUBMITTING
            self.ticket = await self.intake.create(
                TicketCreate(**self.form, image_urls=image_urls or None),
                background_tasks,
            )
        except HelpdeskError as exc:
            logger.info("submission_failed", state=self.state.value, error=exc.message)
            self.state = SubmissionState.FAILED
            self.error = exc
            self.message = Message("error", exc.message)
            return False

        self.reset()
        self.state = SubmissionState.SUCCEEDED
        self.message = Message("success", SUCCESS_MESSAGE)
        return True


async def _read_uploads(uploads: list[UploadFile]) -> list[ImageFile]:
    images = []
    for upload in uploads:
        # an empty file input still posts one nameless part
        if not upload.filename:
            continue
        images.append(
            ImageFile(
                filename=upload.filename,
                content_type=upload.content_type or "",
                data=await upload.read(),
            )
        )
    return images


def _render(
    request: Request,
    form: dict[str, str],
    message: Message | None = None,
    previews: list[str] | None = None,
    accepted: list[str] | None = None,
    rejected: list[str] | None = None,
    status_code: int = 200,
):
    return templates.TemplateResponse(
        request,
        "submit.html",
        {
            "form": form,
            "message": message,
            "previews": previews or [],
            "accepted": accepted or [],
            "rejected": rejected or [],
            "max_image_mb": settings.MAX_IMAGE_BYTES // (1024 * 1024),
        },
        status_code=status_code,
    )


@router.get("/")
async def submission_form(request: Request):
    return _render(request, dict.fromkeys(REQUIRED_FIELDS, ""))


@router.post("/")
async def submit_ticket(
    request: Request,
    background_tasks: BackgroundTasks,
    name: str = Form(""),
    email: str = Form(""),
    title: str = Form(""),
    description: str = Form(""),
    images: list[UploadFile] = File(default=[]),
    intake: TicketIntake = Depends(get_ticket_intake),
    storage: BlobStorage = Depends(get_blob_storage),
):
    submission = TicketSubmission(intake=intake, storage=storage)
    form = {"name": name, "email": email, "title": title, "description": description}

    # rejected files stop the submission before anything is uploaded
    rejected = submission.select_images(await _read_uploads(images))
    if rejected:
        return _render(
            request,
            form,
            submission.message,
            previews=submission.images.previews,
            accepted=[image.filename for image in submission.images.files],
            rejected=rejected,
            status_code=400,
        )

    if await submission.submit(form, background_tasks):
        return _render(request, submission.form, submission.message, status_code=201)
    return _render(
        request,
        submission.form,
        submission.message,
        status_code=submission.error.status_code if submission.error else 400,
    )
