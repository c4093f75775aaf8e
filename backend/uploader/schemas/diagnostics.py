from pydantic import Field

from uploader.schemas.storage import CamelModel


class DiagnosticStep(CamelModel):
    step: str
    ok: bool
    http_status: int | None = None
    code: str | None = None
    message: str | None = None
    count: int | None = None
    keys: list[str] | None = None


class DiagnosticsReport(CamelModel):
    region: str
    bucket: str
    steps: list[DiagnosticStep] = Field(default_factory=list)
