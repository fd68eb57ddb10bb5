from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import armtarget.log
import stevedore
from armtarget.error import ArmTargetError
from armtarget.main import Main

if TYPE_CHECKING:
    from typing import List, Optional

logger = armtarget.log.getLogger("cli")


def main(args: Optional[List[str]] = None) -> None:
    """Translate GCC arm target flags.

    This function creates the main code for the entry-point armtarget. To
    create new actions derive the class
    py:class:`armtarget.action.ArmTargetAction` and register the extension
    by adding in py:file:`setup.py`::

        entry_points={
            'armtarget.action': [
                'foo = mypackage.actions:FooAction']
        }

    :param args: the command line arguments, ``sys.argv[1:]`` if None
    """
    m = Main(name="armtarget")

    subparsers = m.argument_parser.add_subparsers(
        title="action", description="valid actions", dest="action"
    )
    subparsers.required = True

    # Load all actions plugins
    ext = stevedore.ExtensionManager(
        namespace="armtarget.action",
        invoke_on_load=True,
        invoke_args=(subparsers,),
    )

    if len(ext.names()) != len(ext.entry_points_names()):
        raise ArmTargetError(
            "an error occurred when loading armtarget.action entry points %s"
            % ",".join(ext.entry_points_names())
        )

    m.parse_args(args)
    assert m.args is not None

    armtarget.log.debug("action plugins loaded: %s", ",".join(ext.names()))

    try:
        ext[m.args.action].obj.run(m.args)
    except ArmTargetError as err:
        logger.error(err)
        sys.exit(1)
