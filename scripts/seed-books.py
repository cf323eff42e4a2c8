#!/usr/bin/env python3
"""
Seed the DynamoDB Books table with the starter catalogue.

This script:
1. Checks each starter book against the Books table by ISBN
2. Skips books that already exist
3. Writes the rest with a generated id and a conditional put

Environment Variables (optional):
    AWS_PROFILE: AWS profile name (default: 'default')
    AWS_REGION: AWS region (default: 'us-east-2')
    BOOKS_TABLE: DynamoDB table name (default: 'Books')

Usage:
    python scripts/seed-books.py [--dry-run]

    # Use custom profile
    AWS_PROFILE=my-profile python3 scripts/seed-books.py
"""

import argparse
import os
import sys
import uuid

import boto3
from botocore.exceptions import ClientError

PROFILE = os.environ.get('AWS_PROFILE', 'default')
REGION = os.environ.get('AWS_REGION', 'us-east-2')
TABLE_NAME = os.environ.get('BOOKS_TABLE', 'Books')

STARTER_BOOKS = [
    {'isbn': '978-0544003415', 'title': 'The Lord of the Rings', 'author': 'J.R.R. Tolkien', 'stock': 500, 'kind': 'ebook'},
    {'isbn': '978-0451524935', 'title': '1984', 'author': 'George Orwell', 'stock': 150, 'kind': 'physical_copy'},
    {'isbn': '978-0441172719', 'title': 'Dune', 'author': 'Frank Herbert', 'stock': 750, 'kind': 'ebook'},
    {'isbn': '978-0061120084', 'title': 'To Kill a Mockingbird', 'author': 'Harper Lee', 'stock': 200, 'kind': 'physical_copy'},
    {'isbn': '978-0307887894', 'title': 'The Lean Startup', 'author': 'Eric Ries', 'stock': 900, 'kind': 'ebook'},
    {'isbn': '978-0132350884', 'title': 'Clean Code: A Handbook of Agile Software Craftsmanship', 'author': 'Robert C. Martin', 'stock': 75, 'kind': 'physical_copy'},
]


def main():
    parser = argparse.ArgumentParser(description='Seed the Books table with the starter catalogue')
    parser.add_argument('--dry-run', action='store_true', help='Show what would be written without writing')
    args = parser.parse_args()

    session = boto3.Session(profile_name=PROFILE, region_name=REGION)
    table = session.resource('dynamodb').Table(TABLE_NAME)

    print(f"📊 Target DynamoDB table: {TABLE_NAME}")
    print(f"🌍 Using AWS Profile: {PROFILE}")
    print(f"🌎 Using AWS Region: {REGION}")
    if args.dry_run:
        print("🔎 Dry run - no changes will be written")
    print()

    seeded = 0
    skipped = 0
    failed = 0

    for book in STARTER_BOOKS:
        isbn = book['isbn']

        try:
            response = table.get_item(Key={'isbn': isbn})
            if 'Item' in response:
                print(f"⏭️  Skipping (already exists): {isbn} {book['title']}")
                skipped += 1
                continue
        except ClientError as e:
            print(f"❌ Error checking {isbn}: {e}")
            failed += 1
            continue

        if args.dry_run:
            print(f"📝 Would seed: {isbn} {book['title']}")
            seeded += 1
            continue

        try:
            table.put_item(
                Item={**book, 'id': uuid.uuid4().hex},
                ConditionExpression='attribute_not_exists(isbn)',
            )
            print(f"✅ Seeded: {isbn}")
            print(f"   📚 {book['author']} - {book['title']}")
            seeded += 1
        except ClientError as e:
            if e.response['Error']['Code'] == 'ConditionalCheckFailedException':
                print(f"⏭️  Skipping (created concurrently): {isbn}")
                skipped += 1
            else:
                print(f"❌ Failed to seed {isbn}: {e}")
                failed += 1

    print()
    print("=" * 60)
    print("📊 Seed Summary:")
    print(f"   Books seeded: {seeded}")
    print(f"   Books skipped: {skipped}")
    print(f"   Errors: {failed}")
    print("=" * 60)

    return 1 if failed else 0


if __name__ == '__main__':
    sys.exit(main())
