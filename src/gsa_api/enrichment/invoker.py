"""Run the external enrichment command for one request.

Each call gets a fresh result path in the working directory; results are
never cached or reused across requests. Runs are bounded per worker by a
semaphore so a long enrichment does not starve the event loop's other
requests, and can optionally be killed after a timeout.
"""

import asyncio
import os
import shlex
import time
import uuid
from pathlib import Path
from typing import Optional

import structlog

from gsa_api.config.schema import ServiceConfig
from gsa_api.enrichment.models import EnrichmentRequest
from gsa_api.errors import InvocationError

logger = structlog.get_logger()

DATABASE_SUFFIX = ".po"
RESULT_SUFFIX = ".tsv"


class EnrichmentInvoker:
    """Builds and runs `gsa_run.R`-style commands against organism databases."""

    def __init__(
        self,
        data_dir: Path,
        working_dir: Path,
        command: str = "gsa_run.R",
        pvalue: float = 0.05,
        cores: int = 4,
        max_concurrent_runs: int = 2,
        timeout: Optional[float] = None,
    ):
        """
        Initialize invoker.

        Args:
            data_dir: Directory holding <organism>.po databases
            working_dir: Directory for temporary result files
            command: Enrichment executable; may include leading arguments
                (e.g. "Rscript /opt/gsa/gsa_run.R")
            pvalue: Significance threshold passed via --pvalue
            cores: Concurrency hint passed via -c
            max_concurrent_runs: Simultaneous runs allowed in this process
            timeout: Seconds before a run is killed (None = wait indefinitely)
        """
        self.data_dir = Path(data_dir)
        self.working_dir = Path(working_dir)
        self.command = command
        self.pvalue = pvalue
        self.cores = cores
        self.timeout = timeout
        self._semaphore = asyncio.Semaphore(max_concurrent_runs)

    @classmethod
    def from_config(cls, config: ServiceConfig) -> "EnrichmentInvoker":
        return cls(
            data_dir=config.data_dir,
            working_dir=config.working_dir,
            command=config.gsa.command,
            pvalue=config.gsa.pvalue,
            cores=config.gsa.cores,
            max_concurrent_runs=config.gsa.max_concurrent_runs,
            timeout=config.gsa.run_timeout_seconds,
        )

    def database_path(self, organism: str) -> Path:
        return self.data_dir / f"{organism}{DATABASE_SUFFIX}"

    def result_stem(self, organism: str) -> Path:
        """Return a unique output stem; the command appends .tsv to it."""
        return self.working_dir / f"gsa.{organism}.{os.getpid()}.{uuid.uuid4().hex}"

    def build_command(
        self,
        organism: str,
        gene_ids: str,
        output_stem: Path,
    ) -> list[str]:
        """Build the argument vector; the gene list stays a single argument."""
        return [
            *shlex.split(self.command),
            "--db", str(self.database_path(organism)),
            "--gs", gene_ids,
            "--pvalue", str(self.pvalue),
            "--out", str(output_stem),
            "-c", str(self.cores),
        ]

    async def run(self, request: EnrichmentRequest) -> Path:
        """Run the enrichment command and return the path of its result file.

        Args:
            request: Validated enrichment request

        Returns:
            Path to <output stem>.tsv written by the command

        Raises:
            InvocationError: If the database is missing, the command cannot be
                started, exits non-zero, or exceeds the timeout. No result
                file is assumed to exist in any of these cases.
        """
        message = f"Error retrieving overlapping Atlas comparisons for {request.describe()}"

        database = self.database_path(request.organism)
        if not database.is_file():
            logger.error(
                "gsa_database_missing",
                organism=request.organism,
                path=str(database),
            )
            raise InvocationError(message)

        output_stem = self.result_stem(request.organism)
        cmd = self.build_command(request.organism, request.gene_ids_raw, output_stem)
        command_text = shlex.join(cmd)

        async with self._semaphore:
            logger.info("gsa_run_start", command=command_text)
            start = time.monotonic()

            try:
                proc = await asyncio.create_subprocess_exec(
                    *cmd,
                    stdout=asyncio.subprocess.DEVNULL,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                logger.error("gsa_run_failed", command=command_text, error=str(e))
                raise InvocationError(message) from e

            try:
                _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout)
            except asyncio.TimeoutError as e:
                logger.error(
                    "gsa_run_timeout",
                    command=command_text,
                    timeout_seconds=self.timeout,
                )
                raise InvocationError(message) from e
            finally:
                # Also reached on cancellation
                if proc.returncode is None:
                    proc.kill()
                    await asyncio.shield(proc.wait())

            duration = time.monotonic() - start

        if proc.returncode != 0:
            logger.error(
                "gsa_run_failed",
                command=command_text,
                returncode=proc.returncode,
                stderr=stderr.decode("utf-8", errors="replace")[-2000:],
            )
            raise InvocationError(message)

        result_path = output_stem.with_name(output_stem.name + RESULT_SUFFIX)
        logger.info(
            "gsa_run_complete",
            command=command_text,
            duration_seconds=round(duration, 2),
            result_file=str(result_path),
        )
        return result_path
