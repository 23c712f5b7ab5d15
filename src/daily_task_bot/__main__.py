"""Daily Task Bot 主入口"""

from daily_task_bot.run import main


if __name__ == "__main__":
    main()
