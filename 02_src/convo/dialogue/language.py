"""Language detection, localized texts and command vocabularies."""

import re
from typing import Any

ARABIC_RE = re.compile(r"[\u0600-\u06FF]")

_EDGE_PUNCTUATION = " \t\r\n.,!?؟،؛:;…\"'`()[]{}*-_~"
_WHITESPACE_RE = re.compile(r"\s+")


def detect_language(text: str | None) -> str:
    """Return "ar" if the text contains Arabic script, else "en"."""
    return "ar" if ARABIC_RE.search(text or "") else "en"


def normalize_token(text: str | None) -> str:
    """Casefold, collapse whitespace, strip edge punctuation and tatweel."""
    value = (text or "").replace("ـ", "")
    value = _WHITESPACE_RE.sub(" ", value).strip(_EDGE_PUNCTUATION)
    return value.casefold()


CONTINUATION_CUES = frozenset(
    {
        "continue",
        "go on",
        "keep going",
        "carry on",
        "more",
        "please continue",
        "continue please",
        "كمل",
        "كمّل",
        "اكمل",
        "أكمل",
        "تابع",
        "استمر",
        "واصل",
    }
)

YES_TOKENS = frozenset(
    {
        "yes",
        "y",
        "yeah",
        "yep",
        "yup",
        "sure",
        "ok",
        "okay",
        "of course",
        "please do",
        "نعم",
        "ايوه",
        "أيوه",
        "ايوا",
        "اي",
        "إي",
        "أجل",
        "اجل",
        "تمام",
        "اكيد",
        "أكيد",
        "طيب",
    }
)

NO_TOKENS = frozenset(
    {
        "no",
        "n",
        "nope",
        "nah",
        "not now",
        "no thanks",
        "لا",
        "لأ",
        "كلا",
        "لا شكرا",
    }
)

HELP_COMMANDS = frozenset({"help", "/help", "start", "/start", "menu", "مساعدة"})
RESET_COMMANDS = frozenset({"reset", "/reset", "new", "/new", "restart", "جديد"})


SYSTEM_PROMPTS: dict[str, str] = {
    "ar": (
        "أنت {bot_name} مستشار صناعي في الجودة وسلامة الغذاء وHACCP وKPI والتميز المؤسسي.\n"
        "القواعد:\n"
        "- رد عملي تنفيذي: خطوات + ضوابط + سجلات + تحقق.\n"
        "- واتساب: نقاط واضحة بدون إسهاب.\n"
        "- إذا السؤال عام جداً: اسأل سؤال توضيحي واحد فقط."
    ),
    "en": (
        "You are {bot_name}, a practical consultant for Quality, Food Safety (HACCP), "
        "KPIs, and Excellence.\n"
        "Rules:\n"
        "- Actionable steps + controls + records + verification.\n"
        "- Chat-friendly bullets (no long essays).\n"
        "- If too broad: ask ONE clarifying question only."
    ),
}

LANGUAGE_PACKS: dict[str, dict[str, Any]] = {
    "en": {
        "help": (
            "Hi 👋\nI'm {bot_name}.\n"
            "Ask your question about quality, food safety, HACCP or KPIs and "
            "I'll reply with short practical steps.\n"
            "Say \"continue\" to get more of a long answer, or \"reset\" to start over."
        ),
        "reset_ack": "Conversation cleared. Send your next question.",
        "apology": "Sorry, something went wrong while handling your message. Please try again.",
        "generation_fallback": "❌ Couldn't generate a reply. Try again.",
        "text_only": "I currently support text messages only.",
    },
    "ar": {
        "help": (
            "مرحباً 👋\nأنا {bot_name}.\n"
            "اكتب سؤالك مباشرة في الجودة أو سلامة الغذاء أو HACCP أو KPI "
            "وسأرد بخطوات عملية مختصرة.\n"
            "اكتب \"كمل\" للمتابعة أو \"جديد\" لبدء محادثة جديدة."
        ),
        "reset_ack": "تم مسح المحادثة. أرسل سؤالك التالي.",
        "apology": "عذراً، حدث خطأ أثناء معالجة رسالتك. حاول مرة أخرى.",
        "generation_fallback": "❌ ما قدرت أطلع رد الآن. جرّب تاني.",
        "text_only": "حالياً بدعم الرسائل النصية فقط.",
    },
}


def system_prompt(language: str, bot_name: str) -> str:
    """System prompt for the given language."""
    template = SYSTEM_PROMPTS.get(language, SYSTEM_PROMPTS["en"])
    return template.format(bot_name=bot_name)


def localized(key: str, language: str, **kwargs: Any) -> str:
    """Look up a user-facing text, falling back to English."""
    pack = LANGUAGE_PACKS.get(language, LANGUAGE_PACKS["en"])
    text = pack.get(key) or LANGUAGE_PACKS["en"][key]
    return text.format(**kwargs) if kwargs else text
