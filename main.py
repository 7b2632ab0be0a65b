from rich.pretty import pprint

from argtree import *

__ceiling__ = 2048


def here(context):
    context.sender.send("%s teleported to spawn" % context.sender.name)


def there(context):
    context.sender.send("%s teleported to %d %d" % (context.sender.name, context["x"], context["y"]))


tp = (
    command("tp")
    .requires(permission("world.tp"))
    .then(literal("here").executes(here))
    .then(argument("x", Integer(min=0)).then(argument("y", Integer(min=0)).executes(there)))
    .auto_fail()
)


if __name__ == '__main__':
    sender = ConsoleSender("console", ["world.*"])
    with Registry() as registry:
        pprint(tp.register(registry, "teleport"))
        registry.execute("tp here", sender)
        registry.execute("teleport 3 4", sender)
        registry.execute("tp 3 abc", sender)
        registry.execute("warp 1 2", sender)
        pprint(registry.complete("tp h", sender))
