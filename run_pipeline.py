"""
Pipeline Runner
===============

Generates a Cadence 1.0 contract from a natural language description
(classification → enhanced prompts → validation → regeneration → fallback),
or validates an existing .cdc file.

Edit the USER_INPUT variable below or pass --input on the command line.
"""

import os
import json
import sys
from datetime import datetime

from cadence_code_generator import generate_with_validation, generate_validation_report, load_engine_config
from cadence_code_generator.generator import default_generator
from cadence_code_generator.pattern_detector import generate_fix_plan


# ============================================================================
# CONFIGURATION - Edit these values to customize the pipeline
# ============================================================================

# User input: Natural language description of the smart contract
USER_INPUT = """Create an NFT collection where users can mint and transfer artwork with royalties."""

# ============================================================================


def ensure(path: str):
    """Ensure directory exists"""
    os.makedirs(path, exist_ok=True)


def preview(code: str, limit: int = 20):
    lines = code.split("\n")
    print(f"\n📄 Contract Preview (first {limit} lines):")
    for i, line in enumerate(lines[:limit], 1):
        print(f"   {i:3d} | {line}")
    if len(lines) > limit:
        print(f"   ... ({len(lines) - limit} more lines)")


def run_full_pipeline(user_input: str, context: str = None, config_path: str = None, debug: bool = False):
    """
    Run generation with validation and save outputs

    Args:
        user_input: Natural language description of contract
        context: Optional additional context for the model
        config_path: Optional YAML engine configuration
        debug: Print component progress
    """
    print("\n" + "=" * 80)
    print("RUNNING CADENCE PIPELINE (Classify → Generate → Validate → Regenerate)")
    print("=" * 80)
    print("\n📝 USER INPUT:")
    print(user_input)
    print("\n" + "-" * 80)

    config = load_engine_config(config_path)
    config.debug = config.debug or debug

    generator = default_generator(config)
    if generator is None:
        print("⚠️  No OpenAI API key configured (OPENAI_API_KEY / API_KEY). The fallback template will be used.")

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    outdir = f"pipeline_outputs/{timestamp}"
    ensure(outdir)

    print("\n[1/2] Generating contract...")
    print("-" * 80)
    try:
        result = generate_with_validation(user_input, context=context, generator=generator, config=config)
    except Exception as e:
        print(f"❌ Generation Failed: {e}")
        import traceback
        traceback.print_exc()
        return None

    print("✅ Generation complete!")
    print(f"\n📋 Contract Type: {result.contract_type.category.value} ({result.contract_type.complexity.value})")
    print(f"   • Attempts: {result.attempts}")
    print(f"   • Used fallback: {result.used_fallback}")
    print(f"   • Score: {result.validation.score}/100")
    if result.rejection_reason:
        print(f"   • Last rejection: {result.rejection_reason}")
    if result.failure_history:
        kinds = sorted({f.type.value for f in result.failure_history})
        print(f"   • Failure types seen: {', '.join(kinds)}")

    print("\n[2/2] Building validation report...")
    print("-" * 80)
    report = generate_validation_report(result.code, contract_type=result.contract_type)

    code_path = f"{outdir}/Contract.cdc"
    meta_path = f"{outdir}/metadata.json"
    report_path = f"{outdir}/validation_report.json"

    with open(code_path, "w") as f:
        f.write(result.code)
    with open(meta_path, "w") as f:
        json.dump(result.to_metadata_dict(), f, indent=2)
    with open(report_path, "w") as f:
        json.dump(report, f, indent=2)

    print(f"\n📦 Outputs saved:")
    print(f"   • Cadence: {code_path}")
    print(f"   • Metadata: {meta_path}")
    print(f"   • Validation report: {report_path}")

    preview(result.code)

    print("\n" + "=" * 80)
    print("✅ PIPELINE COMPLETE")
    print("=" * 80)

    return {
        "output_dir": outdir,
        "result": result,
        "report": report,
    }


def validate_file(path: str, allow_warnings: bool = False):
    """Validate an existing Cadence file and print the report"""
    with open(path, "r", encoding="utf8") as f:
        code = f.read()

    report = generate_validation_report(code, allow_warnings=allow_warnings)
    validation = report["validation"]

    print("\n" + "=" * 80)
    print(f"VALIDATING {path}")
    print("=" * 80)
    print(f"\n📊 Score: {validation['score']}/100  Valid: {validation['is_valid']}")
    for error in validation["errors"]:
        print(f"   ❌ {error}")
    for warning in validation["warnings"]:
        print(f"   ⚠️  {warning}")

    plan = generate_fix_plan(code)
    if plan.prioritized_fixes:
        print(f"\n🛠  Fix plan ({plan.estimated_minutes} min estimated, risk: {plan.risk_level}):")
        for fix in plan.prioritized_fixes:
            print(f"   • {fix.match.format()}")

    if report["recommendations"]:
        print("\n💡 Recommendations:")
        for rec in report["recommendations"]:
            print(f"   • {rec}")

    return report


def main():
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(
        description="Generate or validate Cadence 1.0 smart contracts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Use USER_INPUT variable from file (default)
  python run_pipeline.py

  # Override with command-line input
  python run_pipeline.py --input "Create a DAO with proposals and voting"

  # Validate an existing contract
  python run_pipeline.py --validate contracts/MyNFT.cdc
        """
    )
    parser.add_argument(
        "--input", "-i",
        type=str,
        help="Override USER_INPUT variable with command-line input"
    )
    parser.add_argument(
        "--context",
        type=str,
        help="Additional context passed to the model"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="YAML engine configuration file"
    )
    parser.add_argument(
        "--validate",
        metavar="FILE",
        type=str,
        help="Validate an existing .cdc file instead of generating"
    )
    parser.add_argument(
        "--allow-warnings",
        action="store_true",
        help="Treat warnings as non-blocking when validating a file"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print component progress"
    )

    args = parser.parse_args()

    try:
        if args.validate:
            report = validate_file(args.validate, allow_warnings=args.allow_warnings)
            sys.exit(0 if report["validation"]["is_valid"] else 1)

        if args.input:
            user_input = args.input
        else:
            user_input = USER_INPUT
            if not user_input or not user_input.strip():
                print("❌ USER_INPUT is empty. Please edit the USER_INPUT variable in run_pipeline.py")
                print("   Or use --input flag: python run_pipeline.py --input 'Your description'")
                sys.exit(1)

        result = run_full_pipeline(user_input, context=args.context, config_path=args.config, debug=args.debug)

        if result:
            print(f"📄 Generated contract: {result['output_dir']}/Contract.cdc")
        else:
            print("\n❌ Pipeline failed. Check errors above.")
            sys.exit(1)

    except KeyboardInterrupt:
        print("\n\n⚠️  Pipeline cancelled by user")
        sys.exit(0)
    except FileNotFoundError as e:
        print(f"\n❌ {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
