from clonelab.store.questions import YamlQuestionBank
from clonelab.store.state import StateManager

__all__ = ["StateManager", "YamlQuestionBank"]
