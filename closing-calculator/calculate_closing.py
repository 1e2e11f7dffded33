"""CLI client for the HomePurchase API. Posts a purchase and prints a terminal report.

Usage:
    python closing-calculator/calculate_closing.py 575000 --down 28750 --deposit 25000 --toronto
    python closing-calculator/calculate_closing.py 800000 --down 160000 --province QC --market-rate
    python closing-calculator/calculate_closing.py 575000 --down 28750 --local
"""

import argparse
import asyncio
import sys
from decimal import Decimal

import httpx


# ── Helpers ──────────────────────────────────────────────────────────────────

def _dollar(v) -> str:
    return f"${float(v):,.2f}"


def _header(title: str) -> None:
    print(f"\n{'=' * 64}")
    print(f"  {title}")
    print(f"{'=' * 64}")


# ── Report sections ──────────────────────────────────────────────────────────

def print_messages(data: dict) -> None:
    messages = data.get("validationMessages") or []
    if messages:
        _header("Please Check")
        for m in messages:
            print(f"  • {m}")
    for w in data.get("warnings") or []:
        print(f"\n  Warning: {w}")


def print_land_transfer_tax(data: dict) -> None:
    ltt = data["landTransferTax"]
    _header("Land Transfer Tax")
    print(f"  Provincial:       {_dollar(ltt['provincial'])}  (rebate -{_dollar(ltt['provincialRebateApplied'])})")
    print(f"  Municipal:        {_dollar(ltt['municipal'])}  (rebate -{_dollar(ltt['municipalRebateApplied'])})")
    if float(ltt["nrst"]) > 0:
        print(f"  NRST:             {_dollar(ltt['nrst'])}")
    print(f"  Total:            {_dollar(ltt['total'])}")


def print_cmhc(data: dict) -> None:
    if not data.get("cmhcApplies"):
        return
    cmhc = data["cmhc"]
    _header("CMHC Insurance")
    print(f"  LTV:              {float(cmhc['ltv']) * 100:.2f}%")
    if cmhc.get("premiumRate") is None:
        print("  Premium:          not insurable (LTV above 95%)")
        return
    print(f"  Premium Rate:     {float(cmhc['premiumRate']):.2f}%")
    print(f"  Financed:         {_dollar(data['financedPremium'])}")
    print(f"  Paid at Closing:  {_dollar(data['premiumAtClosing'])}")
    if float(cmhc["pst"]) > 0:
        print(f"  PST on Premium:   {_dollar(cmhc['pst'])}  ({float(cmhc['pstRate']):.2f}%)")


def print_totals(data: dict) -> None:
    _header("Totals")
    print(f"  Mortgage Principal:   {_dollar(data['mortgagePrincipal'])}")
    print(f"  Monthly Mortgage:     {_dollar(data['monthlyMortgagePayment'])}")
    print(f"  Balance of Down:      {_dollar(data['balanceOfDownPayment'])}")
    print(f"  Cash at Closing:      {_dollar(data['totalCashAtClosing'])}")
    print(f"  Monthly Property Tax: {_dollar(data['monthlyPropertyTax'])}")
    print(f"  Total Monthly:        {_dollar(data['totalMonthlyCarryingCost'])}")


# ── Main ─────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Estimate Canadian closing costs and monthly carrying cost"
    )
    parser.add_argument("price", type=Decimal, help="Purchase price")
    parser.add_argument("--down", type=Decimal, default=Decimal("0"), help="Down payment amount")
    parser.add_argument("--deposit", type=Decimal, default=Decimal("0"), help="Deposit already paid")
    parser.add_argument("--apr", type=Decimal, default=Decimal("5.0"), help="Nominal APR in percent")
    parser.add_argument("--years", type=Decimal, default=Decimal("25"), help="Amortization in years")
    parser.add_argument("--province", choices=["ON", "QC", "SK", "OTHER"], default="ON")
    parser.add_argument("--toronto", action="store_true", help="Property is in the City of Toronto")
    parser.add_argument("--first-time-buyer", action="store_true")
    parser.add_argument("--non-resident", action="store_true")
    parser.add_argument(
        "--property-type",
        choices=["Detached", "Semi-Detached", "Town-house", "Condominium"],
        default="Detached",
    )
    parser.add_argument(
        "--dwelling-type",
        choices=["Single Family", "Duplex", "Triplex", "Four-plex", "Multiplex"],
        default="Single Family",
    )
    parser.add_argument("--cmhc", choices=["finance", "upfront"], default="finance", help="CMHC premium handling")
    parser.add_argument("--inspection", type=Decimal, default=Decimal("0"), help="Inspection fee")
    parser.add_argument("--legal", type=Decimal, default=Decimal("0"), help="Legal fees")
    parser.add_argument("--property-tax", type=Decimal, default=Decimal("0"), help="Annual property tax")
    parser.add_argument("--maintenance", type=Decimal, default=Decimal("0"), help="Monthly maintenance")
    parser.add_argument("--utilities", type=Decimal, default=Decimal("0"), help="Monthly utilities")
    parser.add_argument("--rental", type=Decimal, default=Decimal("0"), help="Monthly rental offset (negative for income)")
    parser.add_argument("--insurance", type=Decimal, default=Decimal("0"), help="Monthly home insurance")
    parser.add_argument("--market-rate", action="store_true", help="Use the market 5-year fixed APR")
    parser.add_argument("--local", action="store_true", help="Compute in-process instead of calling the API")
    parser.add_argument(
        "--api-url",
        default="http://localhost:5173",
        help="API base URL (default: http://localhost:5173)",
    )
    return parser


def build_payload(args: argparse.Namespace) -> dict:
    return {
        "purchasePrice": str(args.price),
        "downPayment": str(args.down),
        "deposit": str(args.deposit),
        "aprPercent": str(args.apr),
        "amortizationYears": str(args.years),
        "province": args.province,
        "isTorontoProperty": args.toronto,
        "firstTimeBuyer": args.first_time_buyer,
        "isNonResident": args.non_resident,
        "propertyType": args.property_type,
        "dwellingType": args.dwelling_type,
        "cmhcHandling": args.cmhc,
        "inspectionFee": str(args.inspection),
        "legalFees": str(args.legal),
        "annualPropertyTax": str(args.property_tax),
        "monthlyMaintenance": str(args.maintenance),
        "monthlyUtilities": str(args.utilities),
        "monthlyRentalOffset": str(args.rental),
        "monthlyInsurance": str(args.insurance),
        "useMarketRate": args.market_rate,
    }


async def run_local(payload: dict) -> dict:
    from fastapi.encoders import jsonable_encoder

    from homepurchase.api.routes.summary import purchase_summary
    from homepurchase.api.schemas import SummaryRequest
    from homepurchase.data.calculator import PurchaseCalculator
    from homepurchase.data.rates import FiveYearFixedRateSource

    req = SummaryRequest.model_validate(payload)
    calculator = PurchaseCalculator(rate_source=FiveYearFixedRateSource())
    resp = await purchase_summary(req, calculator=calculator)
    return jsonable_encoder(resp, by_alias=True)


async def main() -> None:
    args = build_parser().parse_args()
    payload = build_payload(args)

    if args.local:
        data = await run_local(payload)
    else:
        url = f"{args.api_url}/api/summary"
        async with httpx.AsyncClient(timeout=30) as client:
            try:
                resp = await client.post(url, json=payload)
            except httpx.ConnectError:
                print(f"Error: Could not connect to API at {args.api_url}", file=sys.stderr)
                print("Is the server running? Start with: uvicorn homepurchase.api.app:app --port 5173", file=sys.stderr)
                sys.exit(1)
            except httpx.TimeoutException:
                print("Error: Request timed out", file=sys.stderr)
                sys.exit(1)

            if resp.status_code != 200:
                print(f"Error: API returned {resp.status_code}", file=sys.stderr)
                try:
                    detail = resp.json()
                except ValueError:
                    detail = resp.text
                print(f"  {detail}", file=sys.stderr)
                sys.exit(1)

            data = resp.json()

    print_messages(data)
    print_land_transfer_tax(data)
    print_cmhc(data)
    print_totals(data)
    print()


if __name__ == "__main__":
    asyncio.run(main())
