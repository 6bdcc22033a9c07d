#!/usr/bin/env python3
"""
Twin Reference Service Demo Script

Resolves the history in sample_fixture.yaml against its catalog:
- TS-1001 and TS-2002 resolve to their owning sensor components
- TS-9999 has no catalog entity and is dropped
- A second run injects a catalog search failure to show notices

Run:
    pip install -e .
    python demo.py
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from colorama import Fore, Style, just_fix_windows_console

from twinref_svc.adapters.static import StaticTwinClient
from twinref_svc.config import ResolverConfig
from twinref_svc.frames import to_frame
from twinref_svc.query import TwinQuery
from twinref_svc.resolver import ReferenceResolver

FIXTURE = Path(__file__).parent / "sample_fixture.yaml"


def c(text: str, color: str) -> str:
    return f"{color}{text}{Style.RESET_ALL}"


def header(text: str) -> None:
    print(f"\n{c('=' * 60, Style.DIM)}")
    print(c(f"  {text}", Style.BRIGHT))
    print(c('=' * 60, Style.DIM))


async def run(client: StaticTwinClient, verbose: bool = False) -> None:
    resolver = ReferenceResolver(client=client, config=ResolverConfig(verbose_notices=verbose))
    query = TwinQuery(workspace_id="factory", component_type_id="com.example.sensor")

    result = await resolver.resolve_batch(query)

    for ref in result.resolved:
        frame = to_frame(ref)
        values = frame.fields[1].values
        print(f"  {c(frame.name, Fore.CYAN)}  {c(ref.entity_name, Fore.GREEN)}  {values}")
    for notice in result.notices:
        print(c(f"  {notice.severity.value}: {notice.text}", Fore.YELLOW))


def main() -> None:
    just_fix_windows_console()

    header("RESOLVE EXTERNAL IDS")
    asyncio.run(run(StaticTwinClient.from_yaml(FIXTURE)))

    header("VERBOSE: REPORT DROPPED BATCHES")
    asyncio.run(run(StaticTwinClient.from_yaml(FIXTURE), verbose=True))

    header("PARTIAL FAILURE: CATALOG SEARCH DOWN FOR TS-2002")
    client = StaticTwinClient.from_yaml(FIXTURE)
    client.fixture["failures"] = {"list_entities": ["TS-2002"]}
    asyncio.run(run(client))


if __name__ == "__main__":
    main()
