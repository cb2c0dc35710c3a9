import json
from typing import List, Tuple
from colorama import Fore, Style, init

from .models import CheckDefinition, CheckResult

init(autoreset=True)

class ConsoleReporter:
    def print_result(self, check: CheckDefinition, result: CheckResult):
        status = f"{Fore.GREEN}PASS{Style.RESET_ALL}" if result.success else f"{Fore.RED}FAIL{Style.RESET_ALL}"
        print(f"[{status}] {check.id} ({check.target} -> {check.path})")
        if not result.success:
            # Keep one line per check; file contents may be multi-line
            msg = result.message.replace("\n", "\\n")
            if len(msg) > 200:
                msg = msg[:200] + "..."
            print(f"      {Fore.YELLOW}{msg}{Style.RESET_ALL}")

    def print_summary(self, results: List[Tuple[CheckDefinition, CheckResult]]):
        passed = sum(1 for _, r in results if r.success)
        failed = len(results) - passed
        print("\n" + "=" * 60)
        print(f"Checks: {len(results)}  PASSED: {Fore.GREEN}{passed}{Style.RESET_ALL}  FAILED: {Fore.RED}{failed}{Style.RESET_ALL}")
        print("=" * 60)

def generate_json_report(results: List[Tuple[CheckDefinition, CheckResult]], filename: str):
    # Credentials stay out of the report
    data = [
        {
            "id": check.id,
            "target": check.target,
            "path": check.path,
            "success": result.success,
            "message": result.message,
        }
        for check, result in results
    ]
    with open(filename, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    print(f"JSON Report written to: {filename}")
