"""
artifactfetch: install prebuilt native artifacts from GitHub releases,
building from source when no verified artifact can be obtained.
"""
