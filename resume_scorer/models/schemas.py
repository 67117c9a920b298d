from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Tuple, Union

ROLE_NOT_FOUND_MESSAGE = "Job role not found in the dataset"
NONE_PLACEHOLDER = "None"
NOT_AVAILABLE = "N/A"

SUBMISSION_LOG_HEADERS = [
    "First Name",
    "Email",
    "Phone",
    "Signup Date",
    "Signup Time",
    "Job Role",
    "Probability Score",
    "Resume File",
]


# -------- Reference Catalog --------
class CatalogEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_role: str
    required_skills: List[str] = Field(default_factory=list)
    required_frameworks: List[str] = Field(default_factory=list)


class RoleFound(BaseModel):
    model_config = ConfigDict(frozen=True)

    entry: CatalogEntry


class RoleNotFound(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_role: Optional[str] = None


RoleLookup = Union[RoleFound, RoleNotFound]


# -------- Scoring --------
class ScoringResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    job_role: Optional[str] = None
    role_found: bool = True
    probability: float = Field(default=0.0, ge=0.0, le=100.0)
    skills_score: float = 0.0
    frameworks_score: float = 0.0
    matched_skills: Tuple[str, ...] = ()
    missing_skills: Tuple[str, ...] = ()
    matched_frameworks: Tuple[str, ...] = ()
    missing_frameworks: Tuple[str, ...] = ()
    feedback: str = ""

    @property
    def additional_skills(self) -> str:
        if not self.role_found:
            return ROLE_NOT_FOUND_MESSAGE
        return ", ".join(self.missing_skills) or NONE_PLACEHOLDER

    @property
    def additional_frameworks(self) -> str:
        if not self.role_found:
            return ROLE_NOT_FOUND_MESSAGE
        return ", ".join(self.missing_frameworks) or NONE_PLACEHOLDER


# -------- Submission Log --------
class SubmissionRecord(BaseModel):
    first_name: str = NOT_AVAILABLE
    email: str = NOT_AVAILABLE
    phone: str = NOT_AVAILABLE
    signup_date: str
    signup_time: str
    job_role: str = NOT_AVAILABLE
    probability_score: Union[float, str] = 0.0
    resume_file: str = ""

    def to_row(self) -> list:
        """Row values in SUBMISSION_LOG_HEADERS order"""
        return [
            self.first_name,
            self.email,
            self.phone,
            self.signup_date,
            self.signup_time,
            self.job_role,
            self.probability_score,
            self.resume_file,
        ]

    @classmethod
    def from_row(cls, row) -> "SubmissionRecord":
        values = ["" if v is None else v for v in list(row)[:len(SUBMISSION_LOG_HEADERS)]]
        values += [""] * (len(SUBMISSION_LOG_HEADERS) - len(values))
        return cls(
            first_name=str(values[0]),
            email=str(values[1]),
            phone=str(values[2]),
            signup_date=str(values[3]),
            signup_time=str(values[4]),
            job_role=str(values[5]),
            probability_score=values[6],
            resume_file=str(values[7]),
        )


# -------- Upload API --------
class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    job_role: Optional[str] = Field(default=None, alias="jobRole")
    probability: float
    additional_skills: str = Field(alias="additionalSkills")
    additional_frameworks: str = Field(alias="additionalFrameworks")
    feedback: str

    @classmethod
    def from_result(cls, result: ScoringResult) -> "UploadResponse":
        return cls(
            job_role=result.job_role,
            probability=result.probability,
            additional_skills=result.additional_skills,
            additional_frameworks=result.additional_frameworks,
            feedback=result.feedback,
        )
