from clonelab.engine.review import ReviewDesk
from clonelab.engine.workflow import SubmissionWorkflow, WorkflowResult

__all__ = ["ReviewDesk", "SubmissionWorkflow", "WorkflowResult"]
