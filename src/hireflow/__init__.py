"""
Hireflow: resume evaluation and application lifecycle engine.

Scores submitted resumes against a job's required skills and experience,
admits those that clear the gate, and tracks each application through the
hiring stages.
"""

__version__ = "0.1.0"

from hireflow.jobs.analyzer import ResumeAnalyzer, ResumeEvaluation
from hireflow.jobs.application import ApplicationWorkflow, SubmissionResult
from hireflow.core.models import Application, ApplicationStatus, JobRequirement

__all__ = [
    "ResumeAnalyzer",
    "ResumeEvaluation",
    "ApplicationWorkflow",
    "SubmissionResult",
    "Application",
    "ApplicationStatus",
    "JobRequirement",
]
