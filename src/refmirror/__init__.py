"""refmirror - Mirror every ref of a git repository onto another remote.

refmirror fetches all refs (branches, tags and any other ``refs/*``
namespace) from a source repository and force-pushes them to a
destination repository, pruning destination refs that no longer exist
in the source.
"""

__version__ = "1.0.0"
