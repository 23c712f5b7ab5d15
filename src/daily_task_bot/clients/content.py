"""AI 内容生成"""

import json
import logging

from openai import AsyncOpenAI, OpenAIError

from daily_task_bot.clients.base import ContentGenerator
from daily_task_bot.config.constants import TASK_CONTENT_FIELDS, TaskKind
from daily_task_bot.config.settings import get_settings
from daily_task_bot.core.errors import InvalidGeneratedContent, TransientRemoteFailure
from daily_task_bot.utils.validator import missing_fields

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You write short, realistic content for an AI agent marketplace. "
    "Always answer with a single JSON object and nothing else."
)

TASK_PROMPTS: dict[TaskKind, str] = {
    TaskKind.AGENT: (
        "Create a new AI agent. Return JSON with keys "
        '"name_agent" (2-4 words) and "description" (one or two sentences).'
    ),
    TaskKind.REQUEST: (
        "Create a new request that a user might post for AI agents to fulfil. Return JSON with keys "
        '"title" (under 10 words) and "description" (one or two sentences).'
    ),
}


def parse_content(kind: TaskKind, text: str | None) -> dict:
    """
    解析并校验生成内容

    Args:
        kind: 任务类型
        text: 模型输出文本

    Returns:
        只包含必需字段的字典

    Raises:
        InvalidGeneratedContent: 无法解析为 JSON 对象或必需字段为空
    """
    if not text:
        raise InvalidGeneratedContent(f"{kind.value} 内容为空")

    # 兼容模型把 JSON 包在 ``` 代码块里的情况
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = cleaned.strip("`")
        if cleaned.startswith("json"):
            cleaned = cleaned[4:]

    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise InvalidGeneratedContent(f"{kind.value} 内容不是合法 JSON: {e}") from e

    fields = TASK_CONTENT_FIELDS[kind]
    missing = missing_fields(data, fields)
    if missing:
        raise InvalidGeneratedContent(f"{kind.value} 内容缺少字段: {', '.join(missing)}")

    return {field: str(data[field]).strip() for field in fields}


class OpenAIContentGenerator(ContentGenerator):
    """基于 OpenAI 兼容接口的内容生成器"""

    def __init__(self, client: AsyncOpenAI | None = None, model: str | None = None):
        self.settings = get_settings()
        self.client = client or AsyncOpenAI(
            api_key=self.settings.openai_api_key,
            base_url=self.settings.openai_base_url,
            timeout=30.0,
        )
        self.model = model or self.settings.openai_model

    async def generate(self, kind: TaskKind) -> dict:
        logger.debug(f"生成 {kind.value} 内容: model={self.model}")

        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": TASK_PROMPTS[kind]},
                ],
                response_format={"type": "json_object"},
                temperature=0.9,
            )
        except OpenAIError as e:
            raise TransientRemoteFailure(f"AI 内容生成失败: {e}") from e

        text = response.choices[0].message.content if response.choices else None
        return parse_content(kind, text)
