# takoyaki/decode/logs.py

from typing import Dict, List, Iterable

from ..types import RawLog, Log


def decode_log(log: RawLog) -> Log:
    return Log(
        message=log.message,
        program_id=log.program_id,
        log_index=log.log_index,
        kind=log.kind,
    )


def group_logs(logs: Iterable[RawLog]) -> Dict[int, List[Log]]:
    """Group logs by transaction index. The archive returns them in log index order."""
    grouped: Dict[int, List[Log]] = {}
    for log in logs:
        grouped.setdefault(log.transaction_index, []).append(decode_log(log))
    return grouped
