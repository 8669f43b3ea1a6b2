from studylog.messaging.orchestrator import MessageOrchestrator

_orchestrator = None

def get_message_orchestrator() -> MessageOrchestrator:
    """进程内共用一个编排器（无共享可变状态，可并发调用）"""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = MessageOrchestrator()
    return _orchestrator
