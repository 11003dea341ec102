"""
Application layer package.

One use case class per module, each with a single ``execute`` method,
built around domain ports passed to its constructor.
"""
