import asyncio
import sys

from dotenv import load_dotenv
from loguru import logger

from bora_chat.app_config import load_json_config, parse_app_config, resolve_runtime_env
from bora_chat.bootstrap import bootstrap_runtime
from bora_chat.chat_shell import ChatShell


async def main() -> None:
    load_dotenv()

    app = parse_app_config(load_json_config())
    env = resolve_runtime_env()

    try:
        runtime = bootstrap_runtime(app, env)
    except ValueError as ex:
        logger.error(str(ex))
        sys.exit(1)

    print(f"{app.assistant_name} (type 'exit' to quit, '/help' for commands)")
    print(f"Model: {app.model}")
    if app.history_policy_name != "full":
        print(f"History: {app.history_policy_name}")
    if runtime.log_descriptions:
        print(f"Logging: {', '.join(runtime.log_descriptions)}")
    print()

    shell = ChatShell(runtime.session, runtime.formatter, assistant_name=app.assistant_name)
    await shell.run()


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
