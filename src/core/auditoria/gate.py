"""
AuditGate - validação do checklist de fechamento.

Guarda a aresta EM_ANDAMENTO → RESOLVIDO_PENDENTE: toda pergunta
obrigatória para o tipo de chamada do protocolo precisa de uma
resposta dentre as opções enumeradas.

O gate não guarda estado entre chamadas; o catálogo é relido a cada
validação, já que é configurado fora do núcleo.
"""

import logging
from typing import List, Mapping, Optional, Sequence

from src.core.shared.exceptions import AuditoriaIncompletaError, ValidationError

from .entities import (
    PerguntaAuditoria,
    RespostaAuditoria,
    ResultadoAuditoria,
    TipoChamada,
)
from .ports import PerguntaAuditoriaRepository


logger = logging.getLogger(__name__)


class AuditGate:
    """
    Valida respostas de auditoria contra o catálogo.

    Example:
        gate = AuditGate(catalogo_repo)
        resultado = gate.validar(TipoChamada.POS_VENDA, {"fc1": "Boa"})
        if not resultado.ok:
            print(resultado.pendentes)  # ('fc2',)
    """

    def __init__(self, catalogo: PerguntaAuditoriaRepository):
        self.catalogo = catalogo

    def perguntas_obrigatorias(
        self,
        tipo: Optional[TipoChamada],
    ) -> List[PerguntaAuditoria]:
        """
        Resolve o conjunto obrigatório para o tipo de chamada.

        São as perguntas marcadas como confirmacao_fechamento e
        aplicáveis ao tipo (ou a todos os tipos). Protocolos sem tipo
        de origem exigem apenas as perguntas de todos os tipos.
        """
        return [
            p for p in self.catalogo.list_by_tipo_chamada(tipo)
            if p.confirmacao_fechamento
        ]

    def validar(
        self,
        tipo: Optional[TipoChamada],
        respostas: Mapping[str, str],
    ) -> ResultadoAuditoria:
        """
        Valida as respostas sem lançar por pendências.

        Args:
            tipo: Tipo de chamada de origem do protocolo
            respostas: Mapa pergunta_id -> valor

        Returns:
            ResultadoAuditoria com pares validados e IDs pendentes

        Raises:
            ValidationError: Se houver chave fora do checklist
        """
        perguntas = self.perguntas_obrigatorias(tipo)
        ids_validos = {p.id for p in perguntas}

        desconhecidas = sorted(k for k in respostas if k not in ids_validos)
        if desconhecidas:
            raise ValidationError(
                "Perguntas desconhecidas no checklist: " + ", ".join(desconhecidas),
                field="respostas",
            )

        validas = []
        pendentes = []
        for pergunta in perguntas:
            valor = respostas.get(pergunta.id)
            if pergunta.aceita(valor):
                validas.append(RespostaAuditoria(pergunta.id, valor))
            else:
                pendentes.append(pergunta.id)

        return ResultadoAuditoria(respostas=tuple(validas), pendentes=tuple(pendentes))

    def exigir(
        self,
        tipo: Optional[TipoChamada],
        respostas: Mapping[str, str],
    ) -> ResultadoAuditoria:
        """
        Valida e lança se o checklist estiver incompleto.

        Raises:
            AuditoriaIncompletaError: Nomeando todas as perguntas pendentes
            ValidationError: Se houver chave fora do checklist
        """
        resultado = self.validar(tipo, respostas)
        if not resultado.ok:
            logger.debug(f"Checklist incompleto: {resultado.pendentes}")
            raise AuditoriaIncompletaError(resultado.pendentes)
        return resultado

    def compor_texto(
        self,
        tipo: Optional[TipoChamada],
        resumo: str,
        respostas: Sequence[RespostaAuditoria],
    ) -> str:
        """
        Compõe o texto canônico da resolução.

        Formato: "Resolução: <resumo> | <enunciado>: <resposta> | ..."
        com as perguntas na ordem do catálogo.
        """
        textos = {p.id: p.texto for p in self.perguntas_obrigatorias(tipo)}
        partes = [f"Resolução: {resumo.strip()}"]
        partes.extend(
            f"{textos.get(r.pergunta_id, r.pergunta_id)}: {r.valor}"
            for r in respostas
        )
        return " | ".join(partes)
