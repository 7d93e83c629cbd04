"""Prompt templates for the financial assistant (Spanish and English)."""

from finanza.models.transaction import Transaction
from finanza.processing.aggregator import summarize

# Number of most recent transactions given as context for deep advice
RECENT_HISTORY_SIZE = 5


def _pick(lang: str, es: str, en: str) -> str:
    return es if lang == "es" else en


def build_summary(transactions: list[Transaction], lang: str, currency: str) -> str:
    """One-line income/expense/balance/categories summary.

    Categories are listed once each, in first-seen order.
    """
    summary = summarize(transactions)
    categories = ", ".join(dict.fromkeys(t.category for t in transactions))
    if lang == "es":
        return (
            f"Ingresos: {summary.income} {currency}, Gastos: {summary.expense} {currency}, "
            f"Balance: {summary.balance} {currency}. Categorías: {categories}"
        )
    return (
        f"Income: {summary.income} {currency}, Expenses: {summary.expense} {currency}, "
        f"Balance: {summary.balance} {currency}. Categories: {categories}"
    )


def build_transaction_listing(transactions: list[Transaction]) -> str:
    """Compact one-line-per-transaction listing for chat context."""
    return "\n".join(
        f"- {t.date}: {t.description} ({t.category}) | {'+' if t.is_income else '-'}{t.amount}"
        for t in transactions
    )


def build_advice_context(transactions: list[Transaction], currency: str) -> str:
    """Balance plus the most recent transactions, for deep advice."""
    balance = summarize(transactions).balance
    recent = sorted(transactions, key=lambda t: t.date, reverse=True)[:RECENT_HISTORY_SIZE]
    history = ", ".join(f"{t.description} ({t.amount} {currency})" for t in recent)
    return f"User Balance: {balance} {currency}. Recent History: {history}."


def quick_analysis_prompt(summary: str, lang: str) -> str:
    return _pick(
        lang,
        "Analiza brevemente estos datos financieros y dame 3 consejos muy cortos y rápidos "
        f"(máximo 1 frase cada uno) para mejorar el ahorro: {summary}",
        "Briefly analyze these financial data and give me 3 very short and quick tips "
        f"(max 1 sentence each) to improve savings: {summary}",
    )


def chat_system_prompt(transactions: list[Transaction], lang: str, currency: str) -> str:
    listing = build_transaction_listing(transactions)
    if lang == "es":
        return f"""Eres un asistente financiero inteligente integrado en una app.
Tienes acceso a la lista de transacciones del usuario.

DATOS DEL USUARIO (Moneda: {currency}):
{listing}

INSTRUCCIONES:
1. Responde preguntas específicas sobre gastos (ej: "¿Cuál es mi gasto más caro?", "¿Cuánto gasté en comida?").
2. Sé conciso, directo y profesional.
3. Si te preguntan algo fuera de los datos, da consejos financieros generales.
4. Usa formato Markdown para resaltar cifras importantes."""
    return f"""You are a smart financial assistant embedded in an app.
You have access to the user's transaction list.

USER DATA (Currency: {currency}):
{listing}

INSTRUCTIONS:
1. Answer specific questions about spending (e.g., "What is my most expensive expense?", "How much did I spend on food?").
2. Be concise, direct, and professional.
3. If asked about something outside the data, give general financial advice.
4. Use Markdown to highlight important figures."""


def advice_prompt(query: str, context: str, lang: str) -> str:
    return _pick(
        lang,
        f"Contexto Financiero del Usuario: {context}\n\nPregunta del Usuario: {query}\n\n"
        "Actúa como un asesor financiero experto. Tómate tu tiempo para pensar paso a paso "
        "una estrategia detallada. Responde en Español.",
        f"User Financial Context: {context}\n\nUser Question: {query}\n\n"
        "Act as an expert financial advisor. Take your time to think step-by-step about "
        "a detailed strategy. Respond in English.",
    )


def search_prompt(query: str, lang: str) -> str:
    return query + _pick(lang, " (Responde en Español)", " (Respond in English)")


FALLBACK_MESSAGES = {
    "quick_empty": ("No se pudo generar el análisis.", "Could not generate analysis."),
    "quick_error": ("Error al conectar con el asistente rápido.", "Error connecting to quick assistant."),
    "chat_error": ("Lo siento, tuve un problema analizando tus datos.", "Sorry, I had trouble analyzing your data."),
    "advice_empty": ("No se pudo generar el consejo detallado.", "Could not generate detailed advice."),
    "advice_error": (
        "Lo siento, hubo un problema al procesar tu solicitud compleja.",
        "Sorry, there was a problem processing your complex request.",
    ),
}


def fallback_message(key: str, lang: str) -> str:
    """Localized message shown instead of a failed or empty answer."""
    es, en = FALLBACK_MESSAGES[key]
    return _pick(lang, es, en)