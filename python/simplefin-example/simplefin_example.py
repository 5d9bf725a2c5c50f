import argparse
import asyncio
import sys
from datetime import date, datetime, timezone
from typing import cast

from simplefin_helper import (
    SimpleFIN,
    configure_logging,
    load_config,
    parse_account_set,
)


async def main(argv: list[str]) -> None:
    parser = argparse.ArgumentParser()
    parser.register("type", "date", lambda s: date.fromisoformat(s))  # pyright: ignore[reportUnknownLambdaType, reportUnknownArgumentType]
    _ = parser.add_argument(
        "-s",
        "--start",
        type="date",
        help="Start date in YYYY-MM-DD, local time. Defaults to start of month",
    )
    _ = parser.add_argument(
        "-e",
        "--end",
        type="date",
        help="End date in YYYY-MM-DD, local time. Defaults to start of next month",
    )
    _ = parser.add_argument(
        "--claim",
        action="store_true",
        help="Exchange SIMPLEFIN_SETUP_TOKEN for an access key and print it",
    )
    args = parser.parse_args(argv)
    config = load_config()
    _ = configure_logging(config.log_level)
    simplefin = SimpleFIN(timeout=config.timeout)

    if cast(bool, args.claim):
        if config.setup_token is None:
            parser.error("--claim requires SIMPLEFIN_SETUP_TOKEN")
        print(await simplefin.get_access_key(config.setup_token))
        return

    access_key = config.access_url
    if access_key is None:
        access_key = await simplefin.get_access_key(cast(str, config.setup_token))
        print(f"Claimed access key, set SIMPLEFIN_ACCESS_URL={access_key}")
    account_set = parse_account_set(
        await simplefin.get_transactions(
            access_key,
            cast(date | None, args.start),
            cast(date | None, args.end),
            setup_token=config.setup_token,
        )
    )
    for err in account_set.errors:
        print(f"server: {err}", file=sys.stderr)
    for a in account_set.accounts:
        for t in a.transactions:
            posted = datetime.fromtimestamp(t.posted, tz=timezone.utc).date()
            print(f"{a.name}\t{posted}\t${t.amount}\t{t.description}")


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1:]))
