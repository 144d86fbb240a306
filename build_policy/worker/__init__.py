"""
Module pipelines and the workspace run.

Components:
    - pipeline: ModulePipeline, the per-module gate state machine
    - loop: WorkspaceRunner / run_workspace, all modules with isolation
    - storage: ReportStore for the shared coverage output directory

Only storage is re-exported here; import pipeline and loop from their
modules (the policy package depends on storage).
"""

from .storage import FileReportStore, ReportStore, create_report_store

__all__ = [
    "ReportStore",
    "FileReportStore",
    "create_report_store",
]
