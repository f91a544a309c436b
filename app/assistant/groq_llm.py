# app/assistant/groq_llm.py
from groq import Groq

from app.core.config import Settings, settings
from app.core.exceptions import AssistantNotConfiguredError

SYSTEM_PROMPT = """You are an AI assistant for the Expense Management System. You can help users with:

1. **Viewing Expenses**: List all expenses, filter by category or status, or search for specific expenses.
2. **Creating Expenses**: Help users submit new expense claims with amount, date, category, and description.
3. **Approving/Rejecting Expenses**: Managers can approve or reject submitted expenses.
4. **Understanding the System**: Explain how expense management works, statuses, categories, etc.

Available functions:
- get_expenses: Retrieve list of expenses, optionally filtered by category or status
- get_pending_expenses: Get expenses awaiting approval
- get_categories: Get available expense categories
- create_expense: Submit a new expense
- approve_expense: Approve a pending expense (managers only)
- reject_expense: Reject a pending expense (managers only)

When displaying lists of expenses, format them nicely with:
- Clear headers
- Amounts in GBP format (£X.XX)
- Dates in readable format
- Status clearly indicated

Be helpful, concise, and guide users through the expense management process.
"""

NOT_CONFIGURED_MESSAGE = (
    "GenAI services are not configured. To enable AI chat functionality, set "
    "GROQ_API_KEY for this deployment. "
    "You can still use all other features of the Expense Management System."
)


def get_groq_client(cfg: Settings = settings) -> Groq:
    if not cfg.GROQ_API_KEY:
        raise AssistantNotConfiguredError("Missing GROQ_API_KEY")
    return Groq(api_key=cfg.GROQ_API_KEY, timeout=cfg.GROQ_TIMEOUT_SECONDS)


def create_completion(client, cfg: Settings, messages: list, tools: list):
    return client.chat.completions.create(
        model=cfg.GROQ_MODEL,
        temperature=0,
        messages=messages,
        tools=tools,
        tool_choice="auto",
    )
