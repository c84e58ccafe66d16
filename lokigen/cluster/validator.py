"""Live cluster checks for a deployed Loki."""
import subprocess
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

import requests

from .runner import CommandRunner
from ..manifest.builders.service_account import SERVICE_ACCOUNT_NAME

LOKI_SELECTOR = "app.kubernetes.io/name=loki"
LOKI_PORT = 3100
TEST_JOB = "telemetrygen"
TEST_JOB_NAMESPACE = "otel"

class CheckStatus(str, Enum):
    """Outcome of a single check."""
    PASSED = "passed"
    WARNING = "warning"
    FAILED = "failed"
    SKIPPED = "skipped"

@dataclass
class CheckResult:
    """Result of one cluster check."""
    name: str
    status: CheckStatus
    message: str
    hint: Optional[str] = None
    fatal: bool = False

@dataclass
class ValidationReport:
    """Results of a validation run, in execution order."""
    namespace: str
    results: List[CheckResult] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """Check if any check failed."""
        return any(r.status == CheckStatus.FAILED for r in self.results)

    @property
    def aborted(self) -> bool:
        """Check if a fatal failure stopped the run early."""
        return any(r.fatal for r in self.results)

class ClusterValidator:
    """Checks that Loki is deployed and healthy in a cluster."""

    def __init__(
        self,
        runner: CommandRunner,
        namespace: str = "loki",
        port_forward_wait: float = 3.0,
        http_timeout: float = 5.0,
    ):
        """Initialize the validator.

        Args:
            runner: Command runner used for kubectl calls.
            namespace: Namespace Loki is deployed into.
            port_forward_wait: Seconds to wait for the port-forward to come up.
            http_timeout: Timeout for the readiness request.
        """
        self.runner = runner
        self.namespace = namespace
        self.port_forward_wait = port_forward_wait
        self.http_timeout = http_timeout

    def run(self) -> ValidationReport:
        """Run every check, stopping at the first fatal failure."""
        report = ValidationReport(namespace=self.namespace)
        checks: List[Callable[[], CheckResult]] = [
            self.check_kubectl,
            self.check_cluster_connection,
            self.check_namespace,
            self.check_pods,
            self.check_service_account,
            self.check_storage_config,
            self.check_ready,
            self.check_test_job,
        ]
        for check in checks:
            result = check()
            report.results.append(result)
            if result.fatal:
                break
        return report

    def _kubectl(self, *args: str) -> List[str]:
        return ["kubectl", *args]

    def _first_pod(self) -> Optional[str]:
        result = self.runner.run(
            self._kubectl("get", "pods", "-n", self.namespace, "-l", LOKI_SELECTOR,
                          "-o", "jsonpath={.items[0].metadata.name}"),
            check=False,
        )
        name = result.stdout.strip()
        return name if result.returncode == 0 and name else None

    def check_kubectl(self) -> CheckResult:
        if not self.runner.available("kubectl"):
            return CheckResult("kubectl", CheckStatus.FAILED,
                               "kubectl is not installed or not in PATH", fatal=True)
        return CheckResult("kubectl", CheckStatus.PASSED, "kubectl found")

    def check_cluster_connection(self) -> CheckResult:
        if not self.runner.succeeds(self._kubectl("cluster-info")):
            return CheckResult("cluster", CheckStatus.FAILED,
                               "Cannot connect to Kubernetes cluster", fatal=True)
        return CheckResult("cluster", CheckStatus.PASSED, "Connected to Kubernetes cluster")

    def check_namespace(self) -> CheckResult:
        if self.runner.succeeds(self._kubectl("get", "namespace", self.namespace)):
            return CheckResult("namespace", CheckStatus.PASSED, f"Namespace '{self.namespace}' exists")
        return CheckResult(
            "namespace", CheckStatus.FAILED,
            f"Namespace '{self.namespace}' does not exist",
            hint=f"kubectl create namespace {self.namespace}",
            fatal=True,
        )

    def check_pods(self) -> CheckResult:
        base = self._kubectl("get", "pods", "-n", self.namespace, "-l", LOKI_SELECTOR, "--no-headers")
        listing = self.runner.run(base, check=False)
        if listing.returncode != 0:
            return CheckResult(
                "pods", CheckStatus.FAILED,
                f"No Loki pods found in namespace '{self.namespace}'",
                hint="kubectl get applications -n argocd",
                fatal=True,
            )
        total = len([line for line in listing.stdout.splitlines() if line.strip()])
        running_out = self.runner.run(base + ["--field-selector=status.phase=Running"], check=False).stdout
        running = len([line for line in running_out.splitlines() if line.strip()])

        message = f"{running}/{total} Loki pods are running"
        if total > 0 and running == total:
            return CheckResult("pods", CheckStatus.PASSED, message)
        return CheckResult("pods", CheckStatus.WARNING, message,
                           hint=f"kubectl get pods -n {self.namespace} -l {LOKI_SELECTOR}")

    def check_service_account(self) -> CheckResult:
        if not self.runner.succeeds(
            self._kubectl("get", "serviceaccount", SERVICE_ACCOUNT_NAME, "-n", self.namespace)
        ):
            return CheckResult("serviceAccount", CheckStatus.FAILED, "Loki service account not found")

        client_id = self.runner.run(
            self._kubectl("get", "serviceaccount", SERVICE_ACCOUNT_NAME, "-n", self.namespace, "-o",
                          r"jsonpath={.metadata.annotations.azure\.workload\.identity/client-id}"),
            check=False,
        ).stdout.strip()
        if client_id:
            return CheckResult("serviceAccount", CheckStatus.PASSED,
                               f"Azure Workload Identity client ID configured: {client_id}")
        return CheckResult("serviceAccount", CheckStatus.WARNING,
                           "Azure Workload Identity client ID not configured")

    def check_storage_config(self) -> CheckResult:
        pod = self._first_pod()
        if not pod:
            return CheckResult("storage", CheckStatus.SKIPPED, "No Loki pod to inspect")
        logs = self.runner.run(self._kubectl("logs", "-n", self.namespace, pod), check=False).stdout
        if "azure" in logs:
            return CheckResult("storage", CheckStatus.PASSED,
                               f"Azure storage configuration detected in logs of {pod}")
        return CheckResult("storage", CheckStatus.WARNING,
                           f"No Azure storage configuration found in logs of {pod}")

    def check_ready(self) -> CheckResult:
        pod = self._first_pod()
        if not pod:
            return CheckResult("ready", CheckStatus.SKIPPED, "No Loki pod to check")

        forward = self.runner.spawn(
            self._kubectl("port-forward", "-n", self.namespace, pod, f"{LOKI_PORT}:{LOKI_PORT}")
        )
        try:
            time.sleep(self.port_forward_wait)
            response = requests.get(f"http://localhost:{LOKI_PORT}/ready", timeout=self.http_timeout)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            return CheckResult("ready", CheckStatus.WARNING, f"Loki ready endpoint is not accessible: {e}")
        finally:
            forward.terminate()
            try:
                forward.wait(timeout=self.http_timeout)
            except subprocess.TimeoutExpired:
                forward.kill()
                forward.wait()
        return CheckResult("ready", CheckStatus.PASSED, f"Loki ready endpoint is accessible on {pod}")

    def check_test_job(self) -> CheckResult:
        if not self.runner.succeeds(self._kubectl("get", "job", TEST_JOB, "-n", TEST_JOB_NAMESPACE)):
            return CheckResult("ingestion", CheckStatus.SKIPPED, "No test job found",
                               hint="kubectl apply -f setup-test.yaml")
        status = self.runner.run(
            self._kubectl("get", "job", TEST_JOB, "-n", TEST_JOB_NAMESPACE,
                          "-o", "jsonpath={.status.conditions[0].type}"),
            check=False,
        ).stdout.strip()
        if status == "Complete":
            return CheckResult("ingestion", CheckStatus.PASSED, "Test job completed successfully")
        return CheckResult("ingestion", CheckStatus.WARNING, f"Test job status: {status or 'unknown'}")

def useful_commands(namespace: str) -> List[str]:
    """Debugging commands printed after a validation run."""
    return [
        f"kubectl get pods -n {namespace} -l {LOKI_SELECTOR}",
        f"kubectl logs -n {namespace} -l {LOKI_SELECTOR}",
        f"kubectl port-forward -n {namespace} svc/loki-gateway {LOKI_PORT}:80",
        "kubectl apply -f setup-test.yaml",
        "kubectl get applications -n argocd",
        f"kubectl describe serviceaccount {SERVICE_ACCOUNT_NAME} -n {namespace}",
    ]
