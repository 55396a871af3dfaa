"""
snarkjs Command Wrapper
=======================

Runs the snarkjs CLI in a worker thread so proving and verifying do not
block the event loop. All file paths are supplied by the caller.

Version: 0.1.0
"""

import asyncio
import subprocess
from pathlib import Path

from nfcareer.config import get_settings
from nfcareer.logging import get_logger
from nfcareer.zk.errors import ProvingError, ToolchainError


logger = get_logger(__name__)


class SnarkjsCLI:
    """Thin async wrapper around `snarkjs groth16 fullprove|verify`."""

    def __init__(
        self,
        command: list[str] | None = None,
        cwd: str | Path | None = None,
    ):
        """
        Args:
            command: argv prefix used to invoke snarkjs (default `npx snarkjs`)
            cwd: Working directory for the subprocess
        """
        self.command = command or get_settings().zk.snarkjs_argv
        self.cwd = Path(cwd) if cwd else None

    async def _run(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        argv = [*self.command, *args]
        try:
            return await asyncio.to_thread(
                subprocess.run,
                argv,
                capture_output=True,
                text=True,
                cwd=self.cwd,
            )
        except (FileNotFoundError, PermissionError) as e:
            logger.error("snarkjs_unavailable", command=self.command, error=str(e))
            raise ToolchainError(f"Cannot run snarkjs ({' '.join(self.command)}): {e}") from e

    async def fullprove(
        self,
        input_path: Path,
        wasm_path: Path,
        zkey_path: Path,
        proof_path: Path,
        public_path: Path,
    ) -> None:
        """Compute the witness and a Groth16 proof, writing proof and public files."""
        result = await self._run(
            [
                "groth16",
                "fullprove",
                str(input_path),
                str(wasm_path),
                str(zkey_path),
                str(proof_path),
                str(public_path),
            ]
        )
        if result.returncode != 0:
            detail = (result.stderr or result.stdout).strip()
            logger.error(
                "snarkjs_proof_generation_failed",
                stderr=detail,
                circuit=wasm_path.stem,
            )
            raise ProvingError(f"Proof generation failed: {detail}")

    async def verify(self, vkey_path: Path, public_path: Path, proof_path: Path) -> bool:
        """
        Verify a proof against a verification key.

        Returns:
            True for a valid proof, False for a well-formed invalid one.

        Raises:
            ToolchainError: If snarkjs fails without a verdict.
        """
        result = await self._run(
            [
                "groth16",
                "verify",
                str(vkey_path),
                str(public_path),
                str(proof_path),
            ]
        )
        output = f"{result.stdout}\n{result.stderr}"
        if result.returncode == 0 and "OK" in output:
            return True
        if "Invalid proof" in output:
            return False
        raise ToolchainError(f"snarkjs verify gave no verdict: {output.strip()}")
