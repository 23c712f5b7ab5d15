"""格式化工具"""

from daily_task_bot.config.constants import TaskKind

LINE_WIDTH = 52


def separator(char: str = "━") -> str:
    """分隔线"""
    return char * LINE_WIDTH


def banner(title: str) -> str:
    """
    格式化横幅

    Args:
        title: 标题

    Returns:
        三行横幅字符串
    """
    return "\n".join([separator(), title.center(LINE_WIDTH).rstrip(), separator()])


def format_generated_content(kind: TaskKind, content: dict) -> str:
    """格式化 AI 生成内容"""
    if kind == TaskKind.AGENT:
        return f"名称: {content['name_agent']}\n描述: {content['description']}"
    return f"标题: {content['title']}\n描述: {content['description']}"


def format_account_stats(account, stats) -> list[str]:
    """
    格式化单个账号统计

    Args:
        account: 账号模型
        stats: 账号统计

    Returns:
        统计行列表
    """
    return [
        f"账号 {account.label}:",
        f"  UID: {stats.uid or 'N/A'}",
        f"  积分: {stats.total_point}",
        f"  天数: {stats.days}",
        f"  智能体: {stats.agents}",
        f"  需求: {stats.requests}",
        f"  链上交易: {stats.txs}",
        f"  错误: {stats.errors}",
    ]


def format_totals(summary) -> list[str]:
    """格式化汇总统计"""
    return [
        banner("汇总统计"),
        f"  🏆 总积分: {summary.total_points}",
        f"  🤖 总智能体: {summary.total_agents}",
        f"  📋 总需求: {summary.total_requests}",
        f"  ⛓️  总链上交易: {summary.total_txs}",
        f"  ⚠️  总错误: {summary.total_errors}",
        f"  ⏱️  运行时间: {summary.runtime_minutes} 分钟",
        separator(),
    ]


def format_shutdown_line(account, stats) -> str:
    """格式化退出时的单行统计"""
    return (
        f"账号 {account.label}: {stats.agents} 个智能体, {stats.requests} 个需求, "
        f"{stats.txs} 笔交易, {stats.errors} 个错误"
    )
