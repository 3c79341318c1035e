"""Subnet host discovery via nmap ping scan (-sn) with streamed XML decoding."""

from __future__ import annotations

import logging
import subprocess
import threading
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import IO

from lanwake.errors import ReportDecodeError, ScanLaunchError, ScanProcessError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096
SUBNET_PREFIX = 24


@dataclass
class HostStatus:
    state: str = ""  # up, down, unknown, skipped
    reason: str = ""
    reason_ttl: str = ""


@dataclass
class HostAddress:
    addr: str
    addrtype: str = "ipv4"  # ipv4, ipv6, mac
    vendor: str = ""


@dataclass
class Hostname:
    name: str
    type: str = ""


@dataclass
class HostTimes:
    srtt: str = ""
    rttvar: str = ""
    to: str = ""


@dataclass
class Host:
    status: HostStatus = field(default_factory=HostStatus)
    addresses: list[HostAddress] = field(default_factory=list)
    hostnames: list[Hostname] = field(default_factory=list)
    times: HostTimes | None = None

    @property
    def address(self) -> str:
        """First IP address; falls back to whatever nmap listed first."""
        for a in self.addresses:
            if a.addrtype in ("ipv4", "ipv6"):
                return a.addr
        return self.addresses[0].addr if self.addresses else ""

    @property
    def mac(self) -> str | None:
        for a in self.addresses:
            if a.addrtype == "mac":
                return a.addr
        return None

    @property
    def is_up(self) -> bool:
        return self.status.state == "up"


@dataclass
class RunStats:
    finished_time: str = ""
    elapsed: str = ""
    summary: str = ""
    exit: str = ""
    hosts_up: int = 0
    hosts_down: int = 0
    hosts_total: int = 0


@dataclass
class ScanReport:
    scanner: str = ""
    args: str = ""
    start: str = ""
    version: str = ""
    xml_output_version: str = ""
    hosts: list[Host] = field(default_factory=list)
    runstats: RunStats | None = None

    def address_list(self, only_up: bool = False) -> list[str]:
        """One address per host, in report order.

        Hosts are not filtered by state unless ``only_up`` is set.
        """
        return [h.address for h in self.hosts if not only_up or h.is_up]


def _to_int(value: str | None) -> int:
    try:
        return int(value or 0)
    except ValueError:
        return 0


def _host_from_element(elem: ET.Element) -> Host:
    host = Host()
    status = elem.find("status")
    if status is not None:
        host.status = HostStatus(
            state=status.get("state", ""),
            reason=status.get("reason", ""),
            reason_ttl=status.get("reason_ttl", ""),
        )
    for a in elem.iterfind("address"):
        host.addresses.append(
            HostAddress(addr=a.get("addr", ""), addrtype=a.get("addrtype", ""), vendor=a.get("vendor", ""))
        )
    for hn in elem.iterfind("hostnames/hostname"):
        host.hostnames.append(Hostname(name=hn.get("name", ""), type=hn.get("type", "")))
    times = elem.find("times")
    if times is not None:
        host.times = HostTimes(srtt=times.get("srtt", ""), rttvar=times.get("rttvar", ""), to=times.get("to", ""))
    return host


def _runstats_from_element(elem: ET.Element) -> RunStats:
    stats = RunStats()
    finished = elem.find("finished")
    if finished is not None:
        stats.finished_time = finished.get("time", "")
        stats.elapsed = finished.get("elapsed", "")
        stats.summary = finished.get("summary", "")
        stats.exit = finished.get("exit", "")
    hosts = elem.find("hosts")
    if hosts is not None:
        stats.hosts_up = _to_int(hosts.get("up"))
        stats.hosts_down = _to_int(hosts.get("down"))
        stats.hosts_total = _to_int(hosts.get("total"))
    return stats


class ReportDecoder:
    """Incremental nmap XML decoder; feed bytes as they arrive, then close()."""

    def __init__(self) -> None:
        self.report = ScanReport()
        self._parser = ET.XMLPullParser(events=("start", "end"))
        self._depth = 0
        self._root: ET.Element | None = None

    def feed(self, data: bytes) -> None:
        # XMLPullParser queues syntax errors and raises them from read_events()
        try:
            self._parser.feed(data)
            self._drain()
        except ET.ParseError as e:
            raise ReportDecodeError(f"Malformed nmap XML: {e}", self.report) from e

    def close(self) -> ScanReport:
        try:
            self._parser.close()
            self._drain()
        except ET.ParseError as e:
            raise ReportDecodeError(f"Malformed nmap XML: {e}", self.report) from e
        if self._root is None:
            raise ReportDecodeError("Empty nmap report", self.report)
        return self.report

    def _drain(self) -> None:
        for event, elem in self._parser.read_events():
            if event == "start":
                self._depth += 1
                if self._depth == 1:
                    self._start_root(elem)
                continue

            self._depth -= 1
            # Only direct children of <nmaprun> are records
            if self._depth != 1:
                continue
            if elem.tag == "host":
                self.report.hosts.append(_host_from_element(elem))
            elif elem.tag == "runstats":
                self.report.runstats = _runstats_from_element(elem)
            if self._root is not None:
                self._root.remove(elem)

    def _start_root(self, elem: ET.Element) -> None:
        if elem.tag != "nmaprun":
            raise ReportDecodeError(f"Unexpected root element <{elem.tag}>", self.report)
        self._root = elem
        self.report.scanner = elem.get("scanner", "")
        self.report.args = elem.get("args", "")
        self.report.start = elem.get("start", "")
        self.report.version = elem.get("version", "")
        self.report.xml_output_version = elem.get("xmloutputversion", "")


def parse_report(stream: IO[bytes], chunk_size: int = CHUNK_SIZE) -> ScanReport:
    """Decode an nmap XML report from a binary stream as it is produced."""
    decoder = ReportDecoder()
    read = getattr(stream, "read1", stream.read)
    while True:
        chunk = read(chunk_size)
        if not chunk:
            break
        decoder.feed(chunk)
    return decoder.close()


class HostDiscoverer:
    """Lists hosts on a /24 subnet using an external nmap ping scan."""

    def __init__(self, nmap_path: str = "nmap"):
        self._nmap_path = nmap_path

    def command(self, subnet_base: str) -> list[str]:
        return [self._nmap_path, "-sn", "-oX", "-", f"{subnet_base}/{SUBNET_PREFIX}"]

    def scan(self, subnet_base: str) -> ScanReport:
        """Run the scan and return the decoded report.

        Blocks until nmap exits; no timeout is applied here.
        """
        cmd = self.command(subnet_base)
        logger.info("Discovering hosts: %s", " ".join(cmd))

        try:
            proc = subprocess.Popen(cmd, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except OSError as e:
            raise ScanLaunchError(f"Cannot start {self._nmap_path}: {e}") from e

        with proc:
            # stderr is drained concurrently so nmap never blocks on a full pipe
            stderr_chunks: list[bytes] = []
            reader = threading.Thread(
                target=lambda: stderr_chunks.append(proc.stderr.read()),
                name="nmap-stderr",
                daemon=True,
            )
            reader.start()
            try:
                report = parse_report(proc.stdout)
            except ReportDecodeError:
                proc.kill()
                proc.wait()
                reader.join()
                logger.error("nmap output could not be decoded (exit status %s)", proc.returncode)
                raise

            reader.join()
            stderr = b"".join(stderr_chunks).decode("utf-8", errors="replace")
            returncode = proc.wait()

        if returncode != 0:
            logger.error("nmap exited with status %d: %s", returncode, stderr.strip())
            raise ScanProcessError(returncode, stderr, report)

        up = sum(1 for h in report.hosts if h.is_up)
        logger.info("Scan of %s/%d complete — %d host(s), %d up", subnet_base, SUBNET_PREFIX, len(report.hosts), up)
        return report

    def discover(self, subnet_base: str, only_up: bool = False) -> list[str]:
        """Addresses of every host in the report, in report order."""
        return self.scan(subnet_base).address_list(only_up=only_up)
