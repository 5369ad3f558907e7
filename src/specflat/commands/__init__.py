"""Built-in CLI sub-commands for specflat.

* :mod:`~specflat.commands.convert` -- print the normalized document.
* :mod:`~specflat.commands.view` -- projected views and single-schema
  field trees.
* :mod:`~specflat.commands.inspect` -- tables of paths, schemas, auth and
  metadata.
* :mod:`~specflat.commands.config` -- view and modify user settings.

Single commands export a plain callback registered on the root app; groups
export a :class:`typer.Typer` sub-application.
"""
