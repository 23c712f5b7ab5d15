"""验证工具"""


def validate_private_key(key: str) -> bool:
    """
    验证私钥格式

    Args:
        key: 私钥字符串

    Returns:
        是否为 0x 开头且长度足够的私钥
    """
    return bool(key) and key.startswith("0x") and len(key) > 10


def clean_input(text: str) -> str:
    """
    清理输入文本

    Args:
        text: 输入文本

    Returns:
        清理后的文本
    """
    # 去除首尾空格和 Windows 换行
    return text.strip().replace("\r", "")


def missing_fields(data: dict | None, fields: tuple[str, ...]) -> list[str]:
    """
    找出字典中缺失或为空的字段

    Args:
        data: 待检查的字典
        fields: 必需字段

    Returns:
        缺失字段列表
    """
    if not isinstance(data, dict):
        return list(fields)
    return [field for field in fields if not str(data.get(field) or "").strip()]
