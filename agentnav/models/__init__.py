from agentnav.models.input import RecordInput, input_issues
from agentnav.models.record import Collection, Logo, Record

__all__ = ["Collection", "Logo", "Record", "RecordInput", "input_issues"]
