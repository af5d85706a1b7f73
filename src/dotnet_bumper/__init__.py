"""dotnet-bumper: upgrade the .NET version used by a project's files."""

__version__ = "0.1.0"
