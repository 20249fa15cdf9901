"""bootverify: boot-test published virtual machine disk images.

Each pending image is launched as an ephemeral KubeVirt VM with fresh
SSH credentials, awaited until ready, checked in-guest by its artifact's
own tests, and torn down.  Outcomes are merged into a JSON results ledger
so already-verified images are skipped on the next run.
"""

__version__ = "0.1.0"

from bootverify.core.orchestrator import VerifyOrchestrator
from bootverify.core.verifier import ArtifactVerifier

__all__ = ["ArtifactVerifier", "VerifyOrchestrator", "__version__"]
