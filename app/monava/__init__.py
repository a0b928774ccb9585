"""monava - monorepo detection and package enumeration.

Classifies a directory tree as the root of a Node, Nx, Lerna, PNPM, Cargo
or Poetry workspace and lists its member packages, with a TTL cache in
front of both steps.
"""

__version__ = "0.1.0"
