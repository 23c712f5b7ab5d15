"""Daily Task Bot：多账号每日任务顺序执行"""

__version__ = "0.1.0"
