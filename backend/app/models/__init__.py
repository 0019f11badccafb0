from app.models.agent_conversations import AgentConversation
from app.models.agent_delegation_tasks import AgentDelegationTask
from app.models.agent_evals import AgentEvalJudge, AgentEvalResult
from app.models.agent_keys import AgentKey
from app.models.agent_schedules import AgentSchedule
from app.models.agent_stream_servers import AgentStreamServer
from app.models.agents import Agent
from app.models.bot_integrations import BotIntegration, BotPlatform

__all__ = [
    "Agent",
    "AgentConversation",
    "AgentDelegationTask",
    "AgentEvalJudge",
    "AgentEvalResult",
    "AgentKey",
    "AgentSchedule",
    "AgentStreamServer",
    "BotIntegration",
    "BotPlatform",
]
