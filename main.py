from types import SimpleNamespace

from rich.pretty import pprint

from herald import *

players = {
    1: SimpleNamespace(name="ada", authority=3),
    2: SimpleNamespace(name="bob", authority=0),
}

registry.bind_fail(lambda fault: pprint(fault))
registry.resolver = players.get


@command("kick", "i|g", ("id", "reason"), 1, 2, protected=True, authority=2, help="kick a player")
def kick(session, args):
    target = players.get(args[0])
    if target is None:
        return 0
    print(f"{session.name} kicked {target.name}: {args[1] if len(args) > 1 else 'no reason'}")
    return 1


@command("say", "g", 1, 1)
def say(session, args):
    print(f"<{session.name}> {args[0]}")
    return 1


if __name__ == '__main__':
    pprint(find("kick"))
    pprint([
        run(1, "kick 2 spamming the chat"),
        run(2, "kick 1"),
        run(1, "say hello   there"),
        run(1, 'kick "2'),
        run(1, "kick 9"),
    ])
