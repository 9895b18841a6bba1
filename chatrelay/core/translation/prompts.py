"""
Prompt templates for LLM translation providers and tone classification.

Dependencies: langchain_core.prompts
System role: Prompt templates shared by all chat-model providers
"""

from langchain_core.prompts import ChatPromptTemplate

TRANSLATION_SYSTEM_PROMPT = """You are a translation engine inside a multilingual group chat.

## Instructions
1. Translate the user's message into {language}
2. Keep names, emoji, URLs and code exactly as written
3. Keep the register of a casual chat message; do not make it formal
4. Output ONLY the translated text, without quotes, labels or explanations"""

TONE_AWARE_SYSTEM_PROMPT = TRANSLATION_SYSTEM_PROMPT + """
5. The message has a {tone} tone. Choose words that preserve that tone in {language}"""

TRANSLATION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", TRANSLATION_SYSTEM_PROMPT),
    ("human", "{text}"),
])

TONE_AWARE_TRANSLATION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", TONE_AWARE_SYSTEM_PROMPT),
    ("human", "{text}"),
])

TONE_CLASSIFICATION_PROMPT = ChatPromptTemplate.from_messages([
    ("system", """Classify the emotional tone of the chat message.
Answer with exactly one lowercase English word such as: friendly, formal, sarcastic, angry, excited, sad, playful, neutral."""),
    ("human", "{text}"),
])
