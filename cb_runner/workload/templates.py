"""Source templates for synthetic workload artifacts.

Templates use ``string.Template`` syntax; ``$index`` is replaced with the
artifact index so every generated module declares distinct symbols.
"""

from __future__ import annotations

from string import Template

DEFAULT_TEMPLATE = Template(
    """\
// Generated test file $index
import { EventEmitter } from 'events';

export interface BaseEntity$index {
  id: string;
  createdAt: Date;
  updatedAt?: Date;
}

export interface Permission$index {
  action: 'read' | 'write' | 'delete' | 'admin';
  resource: string;
  conditions?: Record<string, unknown>;
}

export interface TestInterface$index<T extends Record<string, unknown>> {
  id: string;
  data: T;
  metadata: {
    version: number;
    tags: string[];
    permissions: Permission$index[];
  };
  process<U>(transformer: (input: T) => U): Promise<U>;
}

export interface Repository$index<T extends BaseEntity$index> {
  findById(id: string): Promise<T | null>;
  create(data: Omit<T, keyof BaseEntity$index>): Promise<T>;
}

export type DeepPartial$index<T> = {
  [P in keyof T]?: T[P] extends object ? DeepPartial$index<T[P]> : T[P];
};

export class DataProcessor$index<T extends BaseEntity$index> extends EventEmitter {
  private cache = new Map<string, T>();
  private readonly batchSize = 100;

  constructor(private repository: Repository$index<T>) {
    super();
    this.on('data:processed', (item: T) => this.cache.set(item.id, item));
  }

  async processBatch(items: Omit<T, keyof BaseEntity$index>[]): Promise<T[]> {
    const results: T[] = [];
    for (const chunk of this.chunkArray(items, this.batchSize)) {
      const processed = await Promise.all(
        chunk.map(async (item) => {
          const created = await this.repository.create(item);
          this.emit('data:processed', created);
          return created;
        })
      );
      results.push(...processed);
    }
    return results;
  }

  private chunkArray<U>(array: U[], size: number): U[][] {
    const chunks: U[][] = [];
    for (let i = 0; i < array.length; i += size) {
      chunks.push(array.slice(i, i + size));
    }
    return chunks;
  }

  getFromCache(id: string): T | undefined {
    return this.cache.get(id);
  }
}

export const AsyncUtils$index = {
  pipe: <T>(...fns: Array<(arg: T) => T>) => (value: T): T =>
    fns.reduce((acc, fn) => fn(acc), value),
  compose: <T>(...fns: Array<(arg: T) => T>) => (value: T): T =>
    fns.reduceRight((acc, fn) => fn(acc), value),
};

export default DataProcessor$index;
"""
)


def render_artifact(template: Template, index: int) -> str:
    """Fill ``template`` for artifact ``index``; unknown placeholders are left intact."""
    return template.safe_substitute(index=index)
